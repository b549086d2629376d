"""Read-only analytics over the decision history."""

from collections import Counter
from datetime import datetime
from typing import Any, Dict, List, Sequence, Tuple

import numpy as np

from product_ranking.models import Decision


def head_to_head(decisions: Sequence[Decision], a: str, b: str) -> Tuple[int, int]:
    a_wins = sum(1 for d in decisions if d.winner_id == a and d.loser_id == b)
    b_wins = sum(1 for d in decisions if d.winner_id == b and d.loser_id == a)
    return a_wins, b_wins


def win_matrix(entity_ids: Sequence[str], decisions: Sequence[Decision]) -> np.ndarray:
    idx_map = {e: i for i, e in enumerate(entity_ids)}
    matrix = np.zeros((len(entity_ids), len(entity_ids)))
    for d in decisions:
        if d.winner_id in idx_map and d.loser_id in idx_map:
            matrix[idx_map[d.winner_id], idx_map[d.loser_id]] += 1
    return matrix


def bradley_terry_strengths(entity_ids: Sequence[str], decisions: Sequence[Decision],
                            max_iter: int = 100, tol: float = 1e-6) -> Dict[str, float]:
    """Fit Bradley-Terry strengths with the MM algorithm.

    Unlike ELO this ignores decision order, so it is a useful cross-check on
    the sequential ratings. Strengths are normalized to sum to 1000; products
    that never won get a near-zero strength.
    """
    if not entity_ids:
        return {}

    wins_matrix = win_matrix(entity_ids, decisions)
    wins = wins_matrix.sum(axis=1)
    games = wins_matrix + wins_matrix.T
    theta = np.ones(len(entity_ids))

    for _ in range(max_iter):
        theta_old = theta.copy()
        pair_sums = theta_old[:, None] + theta_old[None, :]
        denom = np.divide(games, pair_sums, out=np.zeros_like(games), where=games > 0).sum(axis=1)
        theta = np.where((wins > 0) & (denom > 0), wins / np.where(denom > 0, denom, 1.0), 1e-10)
        theta = theta / theta.sum() * len(entity_ids)

        if np.max(np.abs(theta - theta_old)) < tol:
            break

    theta = theta / theta.sum() * 1000
    return {entity_ids[i]: float(theta[i]) for i in range(len(entity_ids))}


def summarize(decisions: Sequence[Decision]) -> Dict[str, Any]:
    entities: List[str] = []
    seen = set()
    for d in decisions:
        for e in (d.winner_id, d.loser_id):
            if e not in seen:
                seen.add(e)
                entities.append(e)

    timestamps = [d.created_at for d in decisions]
    return {
        'total_decisions': len(decisions),
        'distinct_entities': len(entities),
        'decisions_per_user': dict(Counter(d.user_id for d in decisions)),
        'first_decision_at': datetime.fromtimestamp(min(timestamps)).isoformat() if timestamps else None,
        'last_decision_at': datetime.fromtimestamp(max(timestamps)).isoformat() if timestamps else None,
    }
