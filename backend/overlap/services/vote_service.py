"""
Vote ledger: one immutable vote per player per round, never for one's own answer
"""

import logging
from typing import Optional

from overlap.core.errors import (
    AlreadyVotedError,
    InvalidAnswerError,
    InvalidInputError,
    NotFoundError,
    SelfVoteError,
    WrongPhaseError,
)
from overlap.core.phase_clock import RESULTS, VOTING
from overlap.schemas.game_schemas import (
    Ack,
    AnswerResult,
    RoundResults,
    VotableAnswer,
    VotableAnswers,
)
from overlap.services.base_service import BaseGameService

logger = logging.getLogger(__name__)


class VoteService(BaseGameService):

    async def cast_vote(self, room_code: str, player_id: Optional[str], answer_id: Optional[int]) -> Ack:
        """Record the player's vote for another player's answer"""
        if not player_id or answer_id is None:
            raise InvalidInputError("Missing playerId or answerId")

        game, round_obj = self._get_current_round(room_code)
        game_id, round_number = game.id, round_obj.round_number

        if round_obj.phase != VOTING:
            raise WrongPhaseError("Not in voting phase")

        if not self.store.get_player(game_id, player_id):
            raise NotFoundError("Player not found in this game")

        if self.store.has_voted(game_id, round_number, player_id):
            raise AlreadyVotedError()

        answer = self.store.get_answer(game_id, round_number, answer_id)
        if not answer:
            raise InvalidAnswerError()

        if answer.player_id == player_id:
            raise SelfVoteError()

        if not self.store.hold_round_phase(game_id, round_number, VOTING):
            self.store.rollback()
            raise WrongPhaseError("Not in voting phase")

        # The unique constraint decides between concurrent double votes
        if not self.store.insert_vote_if_absent(game_id, round_number, player_id, answer_id):
            self.store.rollback()
            raise AlreadyVotedError()

        self.store.commit()
        logger.info("🗳️ Vote recorded in room %s round %d", room_code, round_number)
        return Ack()

    async def list_votable(self, room_code: str, player_id: Optional[str] = None) -> VotableAnswers:
        """Answers of the current round the player may vote for, plus whether they already voted"""
        game, round_obj = self._get_current_round(room_code)
        game_id, round_number = game.id, round_obj.round_number

        answers = self.store.list_answers(game_id, round_number)
        votable = [
            VotableAnswer(
                id=answer.id,
                text=answer.answer_text,
                author_display_name=answer.player.player_name,
            )
            for answer in answers
            if answer.player_id != player_id
        ]

        has_voted = bool(player_id) and self.store.has_voted(game_id, round_number, player_id)
        return VotableAnswers(answers=votable, has_voted=has_voted)

    async def results(self, room_code: str) -> RoundResults:
        """Vote tally per answer once the round reached results"""
        game, round_obj = self._get_current_round(room_code)
        game_id, round_number = game.id, round_obj.round_number

        if round_obj.phase != RESULTS:
            raise WrongPhaseError("Results are not available yet")

        answers = self.store.list_answers(game_id, round_number)
        tally = self.store.tally_votes(game_id, round_number)

        results = [
            AnswerResult(
                answer_id=answer.id,
                text=answer.answer_text,
                author_display_name=answer.player.player_name,
                votes=tally.get(answer.id, 0),
            )
            for answer in answers
        ]
        results.sort(key=lambda r: (-r.votes, r.answer_id))

        return RoundResults(round_number=round_number, phase=round_obj.phase, results=results)
