import os
from dataclasses import dataclass
from typing import Mapping, Optional

from docodm.consistency import ScanConsistency


def _env_consistency(raw: Optional[str], default: ScanConsistency) -> ScanConsistency:
    if raw is None or not raw.strip():
        return default
    value = raw.strip().lower().replace("-", "_")
    try:
        return ScanConsistency(value)
    except ValueError:
        choices = ", ".join(c.value for c in ScanConsistency)
        raise ValueError(f"invalid scan consistency {raw!r}, expected one of: {choices}") from None


@dataclass(frozen=True)
class Settings:
    default_consistency: ScanConsistency = ScanConsistency.NOT_BOUNDED

    # Store connection
    arango_hosts: str = "http://127.0.0.1:8529"
    database: str = "docodm"
    username: str = "root"
    password: str = ""

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        return cls(
            default_consistency=_env_consistency(env.get("DOCODM_DEFAULT_CONSISTENCY"), cls.default_consistency),
            arango_hosts=env.get("DOCODM_ARANGO_HOSTS", cls.arango_hosts).rstrip("/"),
            database=env.get("DOCODM_DATABASE", cls.database),
            username=env.get("DOCODM_USERNAME", cls.username),
            password=env.get("DOCODM_PASSWORD", cls.password),
        )
