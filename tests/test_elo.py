from product_ranking.elo import expected_score, calculate_elo_update, DEFAULT_RATING


def test_expected_score():
    print("\n" + "="*70)
    print("TEST 1: Expected Score")
    print("="*70)

    cases = [
        (1500, 1500, 0.5),
        (1600, 1400, 0.7597),
        (1400, 1600, 0.2403),
        (2000, 1000, 0.9968),
    ]
    for rating, opponent, expected in cases:
        result = expected_score(rating, opponent)
        print(f"  E({rating} vs {opponent}) = {result:.4f}")
        assert round(result, 4) == expected

    assert abs(expected_score(1600, 1400) + expected_score(1400, 1600) - 1.0) < 1e-12
    print("✓ Expected score test passed\n")


def test_equal_ratings_move_sixteen_points():
    print("\n" + "="*70)
    print("TEST 2: Equal Ratings")
    print("="*70)

    winner, loser = calculate_elo_update(DEFAULT_RATING, DEFAULT_RATING)
    print(f"  Result: winner={winner:.1f}, loser={loser:.1f}")
    assert winner == 1516.0
    assert loser == 1484.0
    print("✓ Equal ratings test passed\n")


def test_deltas_are_symmetric():
    print("\n" + "="*70)
    print("TEST 3: Winner Gain Equals Loser Loss")
    print("="*70)

    for rw, rl in [(1600, 1400), (1400, 1600), (1500, 1500), (2210.5, 987.25), (1484, 1500)]:
        new_w, new_l = calculate_elo_update(rw, rl)
        delta_w, delta_l = new_w - rw, new_l - rl
        print(f"  {rw} vs {rl}: +{delta_w:.4f} / {delta_l:.4f}")
        assert delta_w > 0
        assert delta_l < 0
        assert abs(delta_w + delta_l) < 1e-9

    new_w, new_l = calculate_elo_update(1600, 1400)
    assert abs((new_w - 1600) - 7.688) < 0.001
    print("✓ Symmetric deltas test passed\n")


def test_upset_moves_more_points():
    print("\n" + "="*70)
    print("TEST 4: Upsets and K-factor")
    print("="*70)

    favourite_win, _ = calculate_elo_update(1600, 1400)
    underdog_win, _ = calculate_elo_update(1400, 1600)
    assert (underdog_win - 1400) > (favourite_win - 1600)
    assert abs((underdog_win - 1400) + (favourite_win - 1600) - 32.0) < 1e-9

    winner, loser = calculate_elo_update(1500, 1500, k_factor=16)
    assert winner == 1508.0 and loser == 1492.0

    # No floor: ratings can keep falling.
    _, loser = calculate_elo_update(100, 20)
    assert loser < 20
    print("✓ Upset test passed\n")
