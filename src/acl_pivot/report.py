# src/acl_pivot/report.py

import logging
import sys
from typing import Optional

import pandas as pd
from google.cloud import storage

from acl_pivot.permissions import format_permission

REPORT_COLUMNS = ['principal', 'principal_type', 'resource', 'permission']


def format_register(register) -> str:
    """Render a register as tab separated lines, one block per principal.

    Principals are sorted; within a block resources keep the order in which
    they were first granted. Each block is followed by a blank line.
    """
    lines = []
    for principal, entries in register.items():
        for entry in entries:
            lines.append(f"{principal}\t{entry.resource}\t{format_permission(entry.permission)}\n")
        lines.append("\n")
    return "".join(lines)


def register_to_dataframe(register) -> pd.DataFrame:
    """Flatten a register into one row per (principal, resource)"""
    rows = []
    for principal, entries in register.items():
        principal_type = register.principal_types.get(principal)
        for entry in entries:
            rows.append({
                'principal': principal,
                'principal_type': principal_type.value if principal_type else None,
                'resource': entry.resource,
                'permission': format_permission(entry.permission),
            })
    return pd.DataFrame(rows, columns=REPORT_COLUMNS)


def render_report(register, output_format: str = 'text') -> str:
    if output_format == 'text':
        return format_register(register)
    if output_format == 'csv':
        return register_to_dataframe(register).to_csv(index=False)
    raise ValueError(f"Unsupported report format: {output_format}")


def write_report(report: str, destination: str = '-', storage_client: Optional[storage.Client] = None) -> None:
    """Write a rendered report to stdout, a local file or a gs:// URI"""
    if destination == '-':
        sys.stdout.write(report)
        sys.stdout.flush()
        return

    if destination.startswith('gs://'):
        bucket_name, _, blob_name = destination[len('gs://'):].partition('/')
        if not bucket_name or not blob_name:
            raise ValueError(f"Invalid Cloud Storage destination: {destination}")

        storage_client = storage_client or storage.Client()
        bucket = storage_client.bucket(bucket_name)
        bucket.blob(blob_name).upload_from_string(report, content_type='text/plain')
        logging.info(f"Uploaded report to {destination}")
        return

    with open(destination, 'w') as f:
        f.write(report)
    logging.info(f"Wrote report to {destination}")
