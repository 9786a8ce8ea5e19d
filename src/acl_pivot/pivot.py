# src/acl_pivot/pivot.py

import argparse
import logging
import sys
from typing import List, Optional

from acl_pivot.bigquery.metadata import build_project_register
from acl_pivot.exceptions import ConfigurationError
from acl_pivot.iam.groups import StaticGroupExpander
from acl_pivot.register import expand_groups
from acl_pivot.report import render_report, write_report
from acl_pivot.utils.config import ConfigLoader

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Print, per principal, the BigQuery datasets it can access"
    )

    parser.add_argument('--project_id', type=str, default=None,
                        help='project id (defaults to GOOGLE_CLOUD_PROJECT)')
    parser.add_argument('--config', type=str, default=None,
                        help='path to config.yaml')
    parser.add_argument('--format', dest='output_format', choices=['text', 'csv'], default='text')
    parser.add_argument('--output', type=str, default='-',
                        help="'-' for stdout, a local path or a gs://bucket/path URI")
    parser.add_argument('--expand-groups', action='store_true',
                        help='copy group access onto the members listed in the config')
    parser.add_argument('--log-level', type=str.upper, default=None,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'])

    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    try:
        config_loader = ConfigLoader(args.config)
        config_loader.setup_logging(args.log_level)
        project_id = config_loader.resolve_project_id(args.project_id)
    except ConfigurationError as e:
        print(str(e), file=sys.stderr)
        return 1

    try:
        register = build_project_register(project_id)

        if args.expand_groups:
            expander = StaticGroupExpander(config_loader.get_group_config())
            register = expand_groups(register, expander)

        report = render_report(register, args.output_format)
        write_report(report, args.output)
    except Exception as e:
        logger.error(f"Access report for {project_id} failed: {str(e)}", exc_info=True)
        raise

    return 0


if __name__ == "__main__":
    sys.exit(main())
