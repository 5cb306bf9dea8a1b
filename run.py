import argparse
import logging
import sys

from webfetcher import config as env
from webfetcher.container import Container
from webfetcher.exceptions import ConfigNotFoundError
from webfetcher.services.json_lines_sink import JsonLinesSink

logger = logging.getLogger("webfetcher")


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Crawl the seeds of a YAML job file and print records as JSON lines.")
    parser.add_argument("job", help="path to the YAML job file (relative paths resolve against WEBFETCHER_CONFIGS_DIR)")
    parser.add_argument("-o", "--output", help="append records to this file instead of stdout")
    return parser


def load_jobs(container: Container, job_path: str):
    data = container.config_file_store().load_yaml_dict(job_path)
    if data is None:
        raise ConfigNotFoundError(job_path, "not found or not a YAML mapping")
    return container.crawler_config_parser().parse(config_path=job_path, data=data)


def main(argv=None, container: Container = None) -> int:
    args = build_arg_parser().parse_args(argv)
    logging.basicConfig(
        level=env.get_str_env("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(threadName)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    # Allow dependency injection for testing
    if container is None:
        container = Container()

    try:
        jobs = load_jobs(container, args.job)
    except (ConfigNotFoundError, ValueError) as e:
        logger.error("Cannot load job %s: %s", args.job, e)
        return 2

    if not jobs:
        logger.warning("Job file %s names no url", args.job)
        return 1

    executor = container.crawl_executor()
    stream = open(args.output, "a", encoding="utf-8") if args.output else sys.stdout
    try:
        sink = JsonLinesSink(stream)
        for job in jobs:
            result = executor.execute(job, sink)
            logger.info(
                "Run %s finished: %s pages, %s visited, %s deletions",
                job.job_name,
                result.pages_emitted,
                result.urls_visited,
                result.deletions,
            )
    finally:
        if args.output:
            stream.close()
    return 0


if __name__ == '__main__':
    sys.exit(main())
