from typing import Iterable, List


def csv_to_list(v: str | List[str] | None) -> List[str]:
    if v is None:
        return []
    if isinstance(v, list):
        return [s.strip() for s in v if s and str(s).strip()]
    return [s.strip() for s in str(v).split(",") if s.strip()]


def unique_in_order(values: Iterable[str]) -> List[str]:
    """Drop blanks and repeats, keep first-seen order."""
    seen: set[str] = set()
    out: List[str] = []
    for v in values:
        s = str(v).strip()
        if s and s not in seen:
            seen.add(s)
            out.append(s)
    return out


def list_to_csv(values: Iterable[str] | None) -> str:
    if not values:
        return ""
    return ",".join(unique_in_order(values))
