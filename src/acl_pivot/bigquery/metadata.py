# src/acl_pivot/bigquery/metadata.py

import logging
from typing import Iterator, Optional

from google.api_core.exceptions import GoogleAPIError
from google.cloud import bigquery

from acl_pivot.register import AccessRegister, DatasetAccess, Grant, build_register

logger = logging.getLogger(__name__)


class BigQueryDatasetEnumerator:
    """Lazily yields the access entries of every dataset in a project.

    Datasets are listed and fetched one by one as the enumerator is consumed,
    so a failure on one dataset surfaces before later datasets are requested.
    The enumerator can only be iterated once.
    """

    def __init__(self, project_id: str, client: Optional[bigquery.Client] = None):
        self.project_id = project_id
        self.client = client or bigquery.Client(project=project_id)
        self._consumed = False

    def __iter__(self) -> Iterator[DatasetAccess]:
        if self._consumed:
            raise RuntimeError(f"Datasets of {self.project_id} have already been enumerated")
        self._consumed = True
        return self._datasets()

    def _datasets(self) -> Iterator[DatasetAccess]:
        try:
            for item in self.client.list_datasets(project=self.project_id):
                yield self.fetch(item.reference)
        except GoogleAPIError as e:
            logger.error(f"Failed to enumerate datasets of {self.project_id}: {str(e)}")
            raise

    def fetch(self, dataset_ref) -> DatasetAccess:
        """Fetch the access entries of a single dataset"""
        dataset = self.client.get_dataset(dataset_ref)
        grants = [
            Grant(principal=entry.entity_id, entity_type=entry.entity_type, role=entry.role)
            for entry in dataset.access_entries
        ]
        logger.info(f"Fetched {len(grants)} access entries for dataset {dataset.dataset_id}")
        return DatasetAccess(dataset_id=dataset.dataset_id, grants=grants)


def build_project_register(project_id: str, client: Optional[bigquery.Client] = None) -> AccessRegister:
    """Build the access register of a single BigQuery project"""
    logger.info(f"Scanning datasets of project: {project_id}")
    return build_register(BigQueryDatasetEnumerator(project_id, client=client))
