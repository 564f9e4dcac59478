# gravity_shift/tests/test_simulation.py
import math
from dataclasses import replace

import pytest

from gravity_shift.game.clock import FixedTickSource, drive
from gravity_shift.game.entities import BLOCK, Coin, Obstacle
from gravity_shift.game.simulation import Simulation

from helpers import ConstRandom

W, H = 800, 400
FLOOR = H - 30


class Recorder:
    def __init__(self):
        self.scores, self.coins, self.game_overs = [], [], []

    def kwargs(self):
        return dict(on_score=self.scores.append, on_coins=self.coins.append,
                    on_game_over=self.game_overs.append)


def ceiling_only_sim(**kw):
    # 0.75: every obstacle is a ceiling spike with a coin at y=100, far from the floor lane
    return Simulation(W, H, rng=ConstRandom(0.75), **kw)


def test_fresh_session_rests_on_floor():
    sim = ceiling_only_sim()
    s = sim.state
    assert s.player.y == FLOOR and s.player.grav_dir == 1 and s.player.vy == 0.0
    assert s.score == 0 and s.session.coins == 0
    assert s.obstacles == () and s.coins == () and s.particles == ()


def test_score_identity_holds_every_tick():
    sim = Simulation(W, H, seed=7)
    for t in range(3000):
        if t % 37 == 0:
            sim.on_gravity_flip()
        r = sim.advance_tick(W, H)
        s = sim.state.session
        assert r.score == math.floor(s.distance / 100) + s.bonus
        if r.ended:
            assert r.final_score == r.score
            break


def test_player_stays_in_bounds_and_stops_on_contact():
    sim = Simulation(W, H, seed=21)
    for t in range(3000):
        if t % 23 == 0:
            sim.on_gravity_flip()
        if sim.advance_tick().ended:
            break
        p = sim.state.player
        assert 0.0 <= p.y <= FLOOR
        if (p.grav_dir > 0 and p.y == FLOOR) or (p.grav_dir < 0 and p.y == 0.0):
            assert p.vy == 0.0 and not p.switching


def test_double_flip_without_tick_equals_single_flip():
    sim = ceiling_only_sim()
    assert sim.on_gravity_flip() is True
    assert sim.on_gravity_flip() is False
    assert sim.state.player.grav_dir == -1


def test_end_to_end_600_ticks_then_flip():
    sim = ceiling_only_sim()
    prev = 0
    for _ in range(600):
        r = sim.advance_tick(W, H)
        assert not r.ended
        assert sim.state.player.y == FLOOR and sim.state.player.grav_dir == 1
        assert r.score >= prev
        prev = r.score
    assert prev > 0

    assert sim.on_gravity_flip()
    sim.advance_tick(W, H)
    assert sim.state.player.grav_dir == -1
    assert sim.state.player.y < FLOOR


def test_drive_with_synthetic_clock():
    sim = ceiling_only_sim()
    r = drive(sim, FixedTickSource(601, flips_at={600}))
    assert sim.state.tick == 601
    assert not r.ended
    assert sim.state.player.grav_dir == -1 and sim.state.player.y < FLOOR


def test_coin_pickup_scores_bonus_and_bursts():
    rec = Recorder()
    sim = ceiling_only_sim(**rec.kwargs())
    speed = sim.cfg.initial_speed + sim.cfg.speed_increment
    sim.state = replace(sim.state, coins=(Coin(x=115 + speed, y=385, radius=12),))

    r = sim.advance_tick(W, H)
    s = sim.state
    assert r.coins_collected == 1 and s.session.bonus == 10
    assert r.score == 10
    assert len(s.particles) == 8
    assert all(p.alpha < 1.0 for p in s.particles)
    # the freshly spawned coin is still there, the picked one is not
    assert [c.y for c in s.coins] == [100]
    assert rec.coins[-1] == 1 and rec.scores[-1] == 10


def test_exactly_one_game_over_with_overlapping_obstacles():
    rec = Recorder()
    sim = ceiling_only_sim(**rec.kwargs())
    speed = sim.cfg.initial_speed + sim.cfg.speed_increment
    a = Obstacle(x=95 + speed, y=H - 40, width=40, height=40, kind=BLOCK, on_ceiling=False)
    b = Obstacle(x=110 + speed, y=H - 40, width=40, height=40, kind=BLOCK, on_ceiling=False)
    sim.state = replace(sim.state, obstacles=(a, b))

    r = sim.advance_tick(W, H)
    assert r.ended and r.final_score == r.score
    assert rec.game_overs == [r.score]

    frozen = sim.state
    for _ in range(10):
        r2 = sim.advance_tick(W, H)
        assert r2.ended
    assert sim.state is frozen
    assert sim.on_gravity_flip() is False
    assert rec.game_overs == [r.score]


def test_offscreen_obstacles_are_pruned_within_one_tick():
    sim = ceiling_only_sim()
    old = Obstacle(x=-35, y=0.0, width=40, height=40, kind=BLOCK, on_ceiling=True)
    sim.state = replace(sim.state, obstacles=(old,), coins=(Coin(x=-5, y=100, radius=12),))
    sim.advance_tick(W, H)
    assert all(o.x + o.width > 0 for o in sim.state.obstacles)
    assert all(c.x + c.radius > 0 for c in sim.state.coins)
    assert len(sim.state.obstacles) == 1   # only the fresh spawn


def test_reset_restores_fresh_session():
    rec = Recorder()
    sim = ceiling_only_sim(**rec.kwargs())
    speed = sim.cfg.initial_speed + sim.cfg.speed_increment
    sim.state = replace(sim.state, coins=(Coin(x=115 + speed, y=385, radius=12),))
    for _ in range(50):
        sim.advance_tick(W, H)
    sim.on_gravity_flip()
    sim.advance_tick(W, H)
    assert sim.state.score > 0

    sim.reset(W, H)
    s = sim.state
    assert s.score == 0 and s.session.coins == 0 and s.tick == 0
    assert s.obstacles == () and s.coins == () and s.particles == ()
    assert s.player.y == FLOOR and s.player.grav_dir == 1
    assert rec.scores[-1] == 0 and rec.coins[-1] == 0


def test_reset_clears_game_over_latch():
    sim = ceiling_only_sim()
    block = Obstacle(x=100, y=H - 40, width=40, height=40, kind=BLOCK, on_ceiling=False)
    sim.state = replace(sim.state, obstacles=(block,))
    assert sim.advance_tick(W, H).ended
    sim.reset(W, H)
    assert not sim.advance_tick(W, H).ended
    assert sim.state.tick == 1


def test_invalid_field_is_a_noop_tick():
    sim = Simulation(0, H, rng=ConstRandom(0.75))
    r = sim.advance_tick()
    assert r.score == 0 and not r.ended
    assert sim.state.tick == 0 and sim.state.obstacles == ()

    sim = ceiling_only_sim()
    sim.advance_tick(W, H)
    before = sim.state
    r = sim.advance_tick(-5, 300)
    assert sim.state is before and r.score == before.score


def test_snapshots_are_not_mutated_by_later_ticks():
    sim = ceiling_only_sim()
    first = sim.state
    for _ in range(5):
        sim.advance_tick(W, H)
    assert first.tick == 0 and first.obstacles == ()
    assert sim.state.tick == 5


def test_score_callback_only_fires_on_change():
    rec = Recorder()
    sim = ceiling_only_sim(**rec.kwargs())
    assert rec.scores == [0] and rec.coins == [0]
    for _ in range(5):
        sim.advance_tick(W, H)
    assert rec.scores == [0]
    for _ in range(20):
        sim.advance_tick(W, H)
    assert rec.scores[-1] == 1


def test_same_seed_same_session():
    def run(seed):
        sim = Simulation(W, H, seed=seed)
        for t in range(400):
            if t % 29 == 0:
                sim.on_gravity_flip()
            if sim.advance_tick().ended:
                break
        return sim.state

    assert run(11) == run(11)


def test_spawned_coin_scrolls_on_its_first_tick():
    sim = ceiling_only_sim()
    sim.advance_tick(W, H)
    s = sim.state
    (ob,) = s.obstacles
    (coin,) = s.coins
    assert ob.x == W
    assert coin.x == pytest.approx(ob.x + ob.width + sim.cfg.coin_offset_x - s.session.speed)
