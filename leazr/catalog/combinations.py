"""Attribute combination enumeration and matching.

Pure functions over AttributeSet and Combination values. Matching is
case-insensitive on values, the way catalog editors type them.
"""

from collections.abc import Iterable, Mapping

from leazr.domain.value_objects import AttributeSet, Combination


def enumerate_combinations(attribute_set: AttributeSet) -> list[Combination]:
    """Enumerate every combination of one value per attribute.

    Builds the cartesian product incrementally: starting from one empty
    combination, each attribute extends every partial combination with
    each of its values. The first attribute varies slowest and the last
    one fastest, like nested loops in declaration order.

    Args:
        attribute_set: Declared attributes.

    Returns:
        Combinations in enumeration order. Empty when no attribute is declared.
    """
    if attribute_set.is_empty():
        return []

    result: list[Combination] = [{}]
    for name, values in attribute_set:
        result = [
            {**partial, name: value}
            for partial in result
            for value in values
        ]
    return result


def _normalize(value: object) -> str:
    return str(value).lower()


def combination_matches(existing: Mapping[str, object], candidate: Mapping[str, object]) -> bool:
    """Check whether a stored combination covers a candidate.

    Every attribute of the candidate must be present in the stored
    combination with the same value, ignoring case.

    Args:
        existing: Attributes of a stored priced combination.
        candidate: Attributes to look for.

    Returns:
        True if the stored combination matches.
    """
    return all(
        key in existing and _normalize(existing[key]) == _normalize(value)
        for key, value in candidate.items()
    )


def combination_key(combination: Mapping[str, object]) -> frozenset[tuple[str, str]]:
    """Hashable, case-insensitive identity of a combination."""
    return frozenset((key, _normalize(value)) for key, value in combination.items())


def find_match(
    existing: Iterable[Mapping[str, object]],
    candidate: Mapping[str, object],
) -> Mapping[str, object] | None:
    """Return the first stored combination matching the candidate, if any."""
    for stored in existing:
        if combination_matches(stored, candidate):
            return stored
    return None


def split_missing(
    existing: Iterable[Mapping[str, object]],
    candidates: Iterable[Combination],
) -> tuple[list[Combination], list[Combination]]:
    """Separate candidates that are already stored from the missing ones.

    A candidate equal (ignoring case) to one already kept as missing in
    the same batch counts as existing too.

    Args:
        existing: Attributes of stored priced combinations.
        candidates: Combinations to check.

    Returns:
        Tuple of (missing, already_existing), each in candidate order.
    """
    stored = list(existing)
    accepted: set[frozenset[tuple[str, str]]] = set()
    missing: list[Combination] = []
    present: list[Combination] = []
    for candidate in candidates:
        key = combination_key(candidate)
        if key in accepted or find_match(stored, candidate) is not None:
            present.append(candidate)
        else:
            accepted.add(key)
            missing.append(candidate)
    return missing, present


def validate_combination(
    combination: Mapping[str, str],
    attribute_set: AttributeSet,
) -> tuple[list[str], list[str], dict[str, str]]:
    """Compare a combination with the attributes it should cover.

    Values are compared case-insensitively against the allowed values.

    Args:
        combination: Selected values.
        attribute_set: Declared attributes.

    Returns:
        Tuple of (missing names, unexpected names, invalid name -> value).
        All three are empty for a complete combination.
    """
    missing = [
        name
        for name in attribute_set.names
        if name not in combination or not str(combination[name]).strip()
    ]
    unexpected = [name for name in combination if name not in attribute_set]
    invalid: dict[str, str] = {}
    for name in attribute_set.names:
        if name in missing:
            continue
        allowed = {_normalize(v) for v in attribute_set.values_for(name)}
        if _normalize(combination[name]) not in allowed:
            invalid[name] = str(combination[name])
    return missing, unexpected, invalid


def is_complete(combination: Mapping[str, str], attribute_set: AttributeSet) -> bool:
    """Check that a combination selects one allowed value for every attribute."""
    if attribute_set.is_empty():
        return False
    missing, unexpected, invalid = validate_combination(combination, attribute_set)
    return not (missing or unexpected or invalid)


def combination_label(combination: Mapping[str, object]) -> str:
    """Human-readable combination, e.g. "Couleur: Noir, Taille: M"."""
    return ", ".join(f"{key}: {value}" for key, value in combination.items())
