"""
tokenvest Governance Module

- Poll: ballot creation, one vote per voter, deadline enforcement
"""

from .poll import Ballot, Poll, VoteOption

__all__ = ["Ballot", "Poll", "VoteOption"]
