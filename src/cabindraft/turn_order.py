"""Snake-draft turn order and year-over-year rotation."""

from cabindraft.names import normalize_name


def snake_order(participants: list[str]) -> list[str]:
    """Two-round snake order: round 1 forward, round 2 reversed.

    For N participants the result has 2N turns and the last picker of
    round 1 also opens round 2.
    """
    return list(participants) + list(reversed(participants))


def round_for_turn(index: int, participant_count: int) -> int:
    return 1 if index < participant_count else 2


def next_season_order(order: list[str]) -> list[str]:
    """Next year's order: this year's first picker moves to the end."""
    if not order:
        return []
    return list(order[1:]) + [order[0]]


def season_order(base_order: list[str], base_year: int, year: int,
                 overrides: dict[int, list[str]] | None = None) -> list[str]:
    """Participant order for a season.

    Each year after base_year rotates the base order by one position.
    Years at or before base_year use the base order. An explicit override
    for the year wins.
    """
    if overrides and year in overrides:
        return list(overrides[year])
    diff = year - base_year
    if diff <= 0 or not base_order:
        return list(base_order)
    rotation = diff % len(base_order)
    return list(base_order[rotation:]) + list(base_order[:rotation])


def verify_turn_order(order: list[str], participants: list[str],
                      aliases: dict[str, str] | None = None) -> dict:
    """Verify a turn order is a valid snake draft over the participants.

    Returns dict with:
    - valid: bool
    - errors: list of error strings
    - turns_per_participant: dict of participant -> turn count
    """
    errors = []
    n = len(participants)
    turns_per_participant: dict[str, int] = {p: 0 for p in participants}
    keys = {normalize_name(p, aliases): p for p in participants}

    if len(order) != 2 * n:
        errors.append(f"Turn order has {len(order)} turns (expected {2 * n})")

    for i, name in enumerate(order):
        p = keys.get(normalize_name(name, aliases))
        if p is None:
            errors.append(f"Turn {i + 1}: {name} is not a participant")
            continue
        turns_per_participant[p] += 1

    for p, count in turns_per_participant.items():
        if count != 2:
            errors.append(f"{p}: {count} turns (expected 2)")

    # Round 2 must mirror round 1
    if len(order) == 2 * n:
        for i in range(n):
            if normalize_name(order[i], aliases) != normalize_name(order[2 * n - 1 - i], aliases):
                errors.append(
                    f"Turn {i + 1} ({order[i]}) does not mirror turn "
                    f"{2 * n - i} ({order[2 * n - 1 - i]})"
                )

    return {
        "valid": len(errors) == 0,
        "errors": errors,
        "turns_per_participant": turns_per_participant,
    }
