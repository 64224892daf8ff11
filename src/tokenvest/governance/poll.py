from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, field, replace
from typing import Callable, Dict, List, Optional, Set

from tokenvest.core import config
from tokenvest.core.contract_exceptions import (
    AlreadyVotedError,
    BallotEndedError,
    BallotError,
    InvalidBallotError,
    InvalidOptionError,
)

logger = logging.getLogger(__name__)


@dataclass
class VoteOption:
    description: str
    vote_count: int = 0


@dataclass
class Ballot:
    id: int
    description: str
    creator: str
    deadline: int
    options: List[VoteOption] = field(default_factory=list)
    voters: Set[str] = field(default_factory=set)


class Poll:
    def __init__(
        self,
        max_options: Optional[int] = None,
        time_provider: Optional[Callable[[], int]] = None,
    ):
        """
        Initialize an empty poll contract.

        Args:
            max_options: Largest number of options a ballot may carry
                (default: TOKENVEST_MAX_BALLOT_OPTIONS)
            time_provider: Clock returning unix seconds (default: time.time)
        """
        max_options = config.MAX_BALLOT_OPTIONS if max_options is None else max_options
        if not isinstance(max_options, int) or max_options < 1:
            raise ValueError("max_options must be a positive integer")

        self.max_options = max_options
        self._time_provider = time_provider or (lambda: int(time.time()))
        self._ballots: List[Ballot] = []
        self._lock = threading.RLock()

        logger.info(f"Poll initialized. Max options per ballot: {self.max_options}")

    @property
    def ballot_count(self) -> int:
        return len(self._ballots)

    def create_ballot(
        self,
        creator: str,
        description: str,
        options: List[str],
        duration: int,
        now: Optional[int] = None,
    ) -> int:
        """
        Creates a ballot that accepts votes for ``duration`` seconds.
        Returns the ballot id; ids are sequential starting at 0.
        """
        if not creator:
            raise BallotError("Creator address cannot be empty.")
        if not description:
            raise BallotError("Ballot description cannot be empty.")
        if not options or len(options) > self.max_options:
            raise BallotError(
                f"Ballot needs between 1 and {self.max_options} options, got {len(options or [])}"
            )
        if any(not option for option in options):
            raise BallotError("Option descriptions cannot be empty.")
        if not isinstance(duration, int) or duration <= 0:
            raise BallotError("Duration must be a positive number of seconds.")

        with self._lock:
            current_time = self._time_provider() if now is None else now
            ballot = Ballot(
                id=len(self._ballots),
                description=description,
                creator=creator.lower(),
                deadline=int(current_time) + duration,
                options=[VoteOption(description=option) for option in options],
            )
            self._ballots.append(ballot)

            logger.info(
                f"Ballot {ballot.id} created by {creator} with {len(options)} options. "
                f"Voting ends at {ballot.deadline}",
                extra={"event": "poll.ballot_created", "ballot_id": ballot.id},
            )
            return ballot.id

    def get_ballot(self, ballot_id: int) -> Ballot:
        """Returns a snapshot of the ballot; mutating it does not affect the poll."""
        with self._lock:
            ballot = self._get_ballot(ballot_id)
            return replace(
                ballot,
                options=[VoteOption(o.description, o.vote_count) for o in ballot.options],
                voters=set(ballot.voters),
            )

    def get_vote_options(self, ballot_id: int) -> List[VoteOption]:
        """Returns copies of the ballot options with their current counts."""
        with self._lock:
            ballot = self._get_ballot(ballot_id)
            return [VoteOption(o.description, o.vote_count) for o in ballot.options]

    def has_voted(self, ballot_id: int, voter: str) -> bool:
        with self._lock:
            return voter.lower() in self._get_ballot(ballot_id).voters

    def vote(self, voter: str, ballot_id: int, option_index: int, now: Optional[int] = None) -> None:
        """
        Record one vote for ``option_index``. Each voter votes at most once per
        ballot, regardless of the option.
        """
        with self._lock:
            ballot = self._get_ballot(ballot_id)

            current_time = self._time_provider() if now is None else now
            if current_time >= ballot.deadline:
                raise BallotEndedError(
                    "This ballot has ended",
                    details={"ballot_id": ballot_id, "deadline": ballot.deadline, "now": current_time},
                )

            if not isinstance(option_index, int) or not 0 <= option_index < len(ballot.options):
                raise InvalidOptionError(
                    "Invalid option",
                    details={"ballot_id": ballot_id, "option_index": option_index},
                )

            voter_norm = voter.lower()
            if voter_norm in ballot.voters:
                raise AlreadyVotedError(
                    "You already voted on this ballot",
                    details={"ballot_id": ballot_id, "voter": voter_norm},
                )

            ballot.voters.add(voter_norm)
            ballot.options[option_index].vote_count += 1

            logger.info(
                f"Vote cast on ballot {ballot_id} by {voter}: option {option_index}. "
                f"Current count: {ballot.options[option_index].vote_count}",
                extra={"event": "poll.vote", "ballot_id": ballot_id},
            )

    def get_winning_options(self, ballot_id: int) -> List[int]:
        """Indices of the options with the most votes (all tied leaders)."""
        with self._lock:
            ballot = self._get_ballot(ballot_id)
            top = max(o.vote_count for o in ballot.options)
            return [i for i, o in enumerate(ballot.options) if o.vote_count == top]

    def get_results(self, ballot_id: int) -> Dict[str, object]:
        with self._lock:
            ballot = self._get_ballot(ballot_id)
            current_time = int(self._time_provider())
            return {
                "ballot_id": ballot.id,
                "description": ballot.description,
                "creator": ballot.creator,
                "deadline": ballot.deadline,
                "options": [
                    {"description": o.description, "vote_count": o.vote_count}
                    for o in ballot.options
                ],
                "voter_count": len(ballot.voters),
                "ended": current_time >= ballot.deadline,
            }

    def _get_ballot(self, ballot_id: int) -> Ballot:
        if not isinstance(ballot_id, int) or not 0 <= ballot_id < len(self._ballots):
            raise InvalidBallotError("Invalid ballot id", details={"ballot_id": ballot_id})
        return self._ballots[ballot_id]
