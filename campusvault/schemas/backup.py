from typing import Dict, Optional
from datetime import datetime

from campusvault.schemas.common import CamelModel


class BackupInfo(CamelModel):
    name: str
    created: Optional[datetime] = None
    size_bytes: int = 0
    record_counts: Dict[str, int] = {}
