import re
from collections import defaultdict
from typing import Iterable, Mapping, Optional

DEFAULT_AGENT = "*"

_USER_AGENT = "user-agent:"
_DISALLOW = "disallow:"
_ALLOW = "allow:"
_SITEMAP = "sitemap:"


def _rule_to_regex(rule: str) -> str:
    anchored = rule.endswith("$")
    if anchored:
        rule = rule[:-1]
    regex = re.escape(rule).replace(r"\*", ".*")
    return regex + "$" if anchored else regex


def _compile(rules: Iterable[str]) -> Optional["re.Pattern[str]"]:
    # An empty Disallow value allows everything, so it never contributes a pattern.
    parts = [_rule_to_regex(rule) for rule in sorted(rules) if rule]
    if not parts:
        return None
    return re.compile("|".join(f"(?:{part})" for part in parts))


class RobotsPolicy:
    """
    Rules read from one robots.txt, keyed by user-agent token.

    The policy is never mutated after construction, so worker threads share
    it without locking. Disallow rules are compiled once per agent.
    """

    def __init__(
        self,
        disallowed: Optional[Mapping[str, Iterable[str]]] = None,
        allowed: Optional[Mapping[str, Iterable[str]]] = None,
        sitemaps: Optional[Mapping[str, Iterable[str]]] = None,
    ):
        self.disallowed = {agent: frozenset(rules) for agent, rules in (disallowed or {}).items()}
        self.allowed = {agent: frozenset(rules) for agent, rules in (allowed or {}).items()}
        self.sitemap_locations = {agent: frozenset(urls) for agent, urls in (sitemaps or {}).items()}
        self._patterns = {agent: _compile(rules) for agent, rules in self.disallowed.items()}

    @classmethod
    def empty(cls) -> "RobotsPolicy":
        return cls()

    @classmethod
    def parse(cls, body: str) -> "RobotsPolicy":
        """Parse a robots.txt body. Unrecognised lines are ignored."""
        disallowed = defaultdict(set)
        allowed = defaultdict(set)
        sitemaps = defaultdict(set)
        agent = DEFAULT_AGENT

        for raw_line in (body or "").splitlines():
            line = raw_line.strip()
            if not line or line.startswith("#"):
                continue

            lowered = line.lower()
            if lowered.startswith(_USER_AGENT):
                agent = line[len(_USER_AGENT):].strip()
            elif lowered.startswith(_DISALLOW):
                disallowed[agent].add(line[len(_DISALLOW):].strip())
            elif lowered.startswith(_ALLOW):
                allowed[agent].add(line[len(_ALLOW):].strip())
            elif lowered.startswith(_SITEMAP):
                sitemaps[agent].add(line[len(_SITEMAP):].strip())

        return cls(disallowed=disallowed, allowed=allowed, sitemaps=sitemaps)

    @property
    def sitemaps(self) -> set[str]:
        return {url for urls in self.sitemap_locations.values() for url in urls}

    def is_empty(self) -> bool:
        return not any(self.disallowed.values())

    def is_disallowed(self, url: str, agent: str = DEFAULT_AGENT) -> bool:
        """True when any disallow rule of `*` or of `agent` occurs in `url`."""
        agents = {DEFAULT_AGENT, agent} if agent else {DEFAULT_AGENT}
        for name in agents:
            pattern = self._patterns.get(name)
            if pattern is not None and pattern.search(url):
                return True
        return False

    def __repr__(self):
        return f"<RobotsPolicy agents={sorted(self.disallowed)} sitemaps={len(self.sitemaps)}>"
