"""File-backed SeasonRuleRepository - one JSON document per tenant"""
import asyncio
import hashlib
import logging
import os
from pathlib import Path
from typing import List, Union

from pydantic import TypeAdapter, ValidationError

from domain.entities import SeasonRule
from domain.repositories import SeasonRuleRepository

logger = logging.getLogger(__name__)

_rules_adapter = TypeAdapter(List[SeasonRule])


class JsonFileSeasonRuleRepository(SeasonRuleRepository):
    """Keeps each tenant's rule list in ``<directory>/<digest>.json`` so it survives restarts"""

    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory)

    def path_for(self, tenant_id: str) -> Path:
        # Fixed-length name whatever characters the tenant id holds
        digest = hashlib.sha256(tenant_id.encode("utf-8")).hexdigest()
        return self.directory / f"{digest}.json"

    async def load(self, tenant_id: str) -> List[SeasonRule]:
        """Load the tenant's rules; a missing or unreadable file is an empty list"""
        return await asyncio.to_thread(self._read, tenant_id)

    async def save(self, tenant_id: str, rules: List[SeasonRule]) -> None:
        """Replace the tenant's rule list, writing through a temp file"""
        await asyncio.to_thread(self._write, tenant_id, list(rules))

    def _read(self, tenant_id: str) -> List[SeasonRule]:
        path = self.path_for(tenant_id)
        if not path.exists():
            return []

        try:
            return _rules_adapter.validate_json(path.read_bytes())
        except (OSError, ValidationError) as e:
            logger.warning(f"Ignoring unreadable season rules for tenant {tenant_id} at {path}: {e}")
            return []

    def _write(self, tenant_id: str, rules: List[SeasonRule]) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self.path_for(tenant_id)
        tmp_path = path.with_suffix(".json.tmp")
        tmp_path.write_bytes(_rules_adapter.dump_json(rules, indent=2))
        os.replace(tmp_path, path)
        logger.debug(f"Saved {len(rules)} season rules for tenant {tenant_id} to {path}")
