from types import MappingProxyType
from typing import Mapping, Optional, Tuple

REGULATION_BATCHES: Mapping[str, Tuple[str, ...]] = MappingProxyType(
    {
        "2017": ("2017-2021", "2018-2022", "2019-2023", "2020-2024"),
        "2021": ("2021-2025", "2022-2026"),
        "2023": ("2023-2027", "2024-2028", "2025-2029"),
        "2026": ("2026-2030", "2027-2031", "2028-2032"),
    }
)


def batches_for_regulation(regulation: str) -> Tuple[str, ...]:
    return REGULATION_BATCHES.get(regulation, ())


def regulation_for_batch(batch: str) -> Optional[str]:
    for regulation, batches in REGULATION_BATCHES.items():
        if batch in batches:
            return regulation
    return None
