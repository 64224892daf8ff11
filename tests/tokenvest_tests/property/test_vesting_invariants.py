"""
Property-based tests for vesting invariants.

Verifies across random inputs that:
- vested_amount is a non-decreasing step function with five plateaus
- the fourth quarter always lands exactly on the total
- released never exceeds total under arbitrary release sequences
- the pool is never over-committed

Uses Hypothesis for property-based testing with random inputs.
"""

import pytest
from hypothesis import given, settings, strategies as st

from tokenvest.core.constants import MONTH, QUARTER, TOTAL_QUARTERS
from tokenvest.core.contract_exceptions import (
    DuplicateScheduleError,
    FullyReleasedError,
    InsufficientCapacityError,
    NotStartedError,
)
from tokenvest.core.contracts.erc20 import ERC20Token
from tokenvest.core.vesting.contract import VestingContract
from tokenvest.core.vesting.release_calculator import vested_amount
from tokenvest.core.vesting.schedule import VestingSchedule

START = 1_700_000_000
OWNER = "0xowner"

totals = st.integers(min_value=1, max_value=10**30)
offsets = st.integers(min_value=0, max_value=20 * QUARTER)


class TestReleaseCalculatorProperties:

    @given(total=totals, a=offsets, b=offsets)
    @settings(max_examples=300)
    def test_monotonic(self, total, a, b):
        schedule = VestingSchedule("0xuser", START, total)
        early, late = sorted((a, b))
        assert vested_amount(schedule, START + early) <= vested_amount(schedule, START + late)

    @given(total=totals)
    @settings(max_examples=200)
    def test_five_plateaus_and_exact_total(self, total):
        schedule = VestingSchedule("0xuser", START, total)
        samples = range(0, 5 * QUARTER, MONTH)
        plateaus = {vested_amount(schedule, START + s) for s in samples}
        assert len(plateaus) <= TOTAL_QUARTERS + 1
        assert vested_amount(schedule, START + 12 * MONTH) == total
        if total >= TOTAL_QUARTERS:
            assert len(plateaus) == TOTAL_QUARTERS + 1

    @given(total=totals, offset=offsets)
    @settings(max_examples=200)
    def test_bounded_by_total(self, total, offset):
        vested = vested_amount(VestingSchedule("0xuser", START, total), START + offset)
        assert 0 <= vested <= total

    @given(total=totals, before=st.integers(min_value=1, max_value=10**9))
    def test_before_start_never_vests(self, total, before):
        with pytest.raises(NotStartedError):
            vested_amount(VestingSchedule("0xuser", START, total), START - before)


operations = st.lists(
    st.one_of(
        st.tuples(st.just("create"), st.integers(0, 4), st.integers(0, 400)),
        st.tuples(st.just("release"), st.integers(0, 4), st.integers(0, 5 * QUARTER)),
        st.tuples(st.just("deposit"), st.integers(0, 4), st.integers(1, 200)),
    ),
    max_size=40,
)


class TestContractProperties:

    @given(pool=st.integers(0, 1_000), ops=operations)
    @settings(max_examples=150, deadline=None)
    def test_random_operation_sequences(self, pool, ops):
        token = ERC20Token.deploy(OWNER, initial_supply=10**9)
        vesting = VestingContract(token, OWNER)
        token.transfer(OWNER, vesting.address, pool)
        receivers = [f"0xreceiver{i}" for i in range(5)]
        paid = {r: 0 for r in receivers}
        now = START

        for kind, index, value in ops:
            receiver = receivers[index]
            if kind == "create":
                available = vesting.get_available_amount()
                existed = vesting.get_vesting_schedule(receiver) is not None
                try:
                    vesting.create_vesting_schedule(receiver, START, value)
                except InsufficientCapacityError:
                    assert not existed
                    assert value > available
                    continue
                except DuplicateScheduleError:
                    assert existed
                    continue
                assert not existed
                assert vesting.get_available_amount() == available - value
            elif kind == "release":
                now = max(now, START + value)
                if vesting.get_vesting_schedule(receiver) is None:
                    continue
                try:
                    paid[receiver] += vesting.release(receiver, receiver, now=now)
                except FullyReleasedError:
                    pass
            else:
                token.transfer(OWNER, vesting.address, value)

            committed = 0
            for r in receivers:
                schedule = vesting.get_vesting_schedule(r)
                if schedule is None:
                    continue
                assert 0 <= schedule.released <= schedule.total
                assert schedule.released == paid[r] == token.balance_of(r)
                committed += schedule.total - schedule.released
            assert committed <= token.balance_of(vesting.address)

    @given(total=st.integers(1, 10_000), times=st.lists(st.integers(0, 6 * QUARTER), max_size=20))
    @settings(max_examples=100, deadline=None)
    def test_repeated_releases_pay_exactly_vested(self, total, times):
        token = ERC20Token.deploy(OWNER, initial_supply=total)
        vesting = VestingContract(token, OWNER)
        token.transfer(OWNER, vesting.address, total)
        vesting.create_vesting_schedule("0xuser", START, total)

        for offset in sorted(times):
            try:
                vesting.release(OWNER, "0xuser", now=START + offset)
            except FullyReleasedError:
                assert token.balance_of("0xuser") == total
                continue
            assert token.balance_of("0xuser") == vested_amount(
                VestingSchedule("0xuser", START, total), START + offset
            )
