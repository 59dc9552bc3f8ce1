# engine/stats.py

STAT_KEYS = ("str", "dex", "int", "maxHp", "currentHp", "ac")

DEFEND_AC_BONUS = 5


def stat_mod(score: int) -> int:
    """
    Attack modifier from a raw score: floor((score - 10) / 2).
      - STR 10 => +0
      - STR 16 => +3
      - STR 7  => -2
    """
    try:
        score = int(score or 0)
    except (TypeError, ValueError):
        score = 0
    return (score - 10) // 2


def sum_stats(*sources) -> dict:
    """
    Field-wise sum of stat blocks. Missing fields count as 0.
    currentHp always starts equal to the summed maxHp.
    """
    total = {key: 0 for key in STAT_KEYS}
    for block in sources:
        if not block:
            continue
        for key in STAT_KEYS:
            if key == "currentHp":
                continue
            total[key] += int(block.get(key, 0) or 0)
    total["currentHp"] = total["maxHp"]
    return total


def clamp_hp(value: int, max_hp: int) -> int:
    return max(0, min(int(max_hp), int(value)))


def effective_ac(player: dict) -> int:
    ac = int(player["stats"]["ac"])
    if player.get("isDefending"):
        ac += DEFEND_AC_BONUS
    return ac
