"""
Game store: every read and write the game rules need, over a SQLAlchemy session.

Writes never commit on their own. The service handling a request calls
``commit()`` once, so multi-row changes (round + game) land in one transaction.
"""

import logging
import random
from contextlib import contextmanager
from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from overlap.core.errors import StoreFailure
from overlap.models.answer import Answer
from overlap.models.game import Game
from overlap.models.player import Player
from overlap.models.prompt import Prompt
from overlap.models.round_model import Round
from overlap.models.vote import Vote

logger = logging.getLogger(__name__)

# Dialects with a native INSERT ... ON CONFLICT
_UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class GameStore:
    """Data access for games, players, rounds, answers, votes and prompts"""

    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def _store_op(self, operation: str):
        """Roll back on failure; unique violations propagate, the rest become StoreFailure"""
        try:
            yield
        except IntegrityError:
            self.db.rollback()
            raise
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("❌ Store operation %s failed: %s", operation, e)
            raise StoreFailure(f"Store operation failed: {operation}") from e

    def _native_insert(self):
        return _UPSERT_INSERTS.get(self.db.get_bind().dialect.name)

    # ── Transactions ─────────────────────────────

    def commit(self) -> None:
        with self._store_op("commit"):
            self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()

    # ── Games ────────────────────────────────────

    def room_code_exists(self, room_code: str) -> bool:
        with self._store_op("room_code_exists"):
            return self.db.query(Game.id).filter(Game.room_code == room_code).first() is not None

    def create_game(self, room_code: str) -> Game:
        with self._store_op("create_game"):
            game = Game(room_code=room_code, status="lobby", current_round=0)
            self.db.add(game)
            self.db.flush()
            return game

    def get_game_by_room_code(self, room_code: str) -> Optional[Game]:
        with self._store_op("get_game_by_room_code"):
            return self.db.query(Game).filter(Game.room_code == room_code).first()

    def mark_game_started(self, game_id: int, phase: str, started_at: datetime) -> bool:
        """lobby -> playing with round 1 open; False if the game already left the lobby"""
        with self._store_op("mark_game_started"):
            updated = self.db.query(Game).filter(
                Game.id == game_id,
                Game.status == "lobby"
            ).update({
                "status": "playing",
                "current_round": 1,
                "current_phase": phase,
                "phase_started_at": started_at,
            }, synchronize_session=False)
            return updated == 1

    def hold_lobby(self, game_id: int) -> bool:
        """No-op conditional update that locks the game row while it is still in the lobby.

        False if the game already left the lobby. Later writes in the same
        transaction are ordered against a concurrent start.
        """
        with self._store_op("hold_lobby"):
            updated = self.db.query(Game).filter(
                Game.id == game_id,
                Game.status == "lobby"
            ).update({"status": Game.status}, synchronize_session=False)
            return updated == 1

    def update_game_phase(self, game_id: int, expected_phase: Optional[str], new_phase: str,
                          started_at: datetime) -> bool:
        """Conditional update of the cached phase on the game row"""
        with self._store_op("update_game_phase"):
            query = self.db.query(Game).filter(Game.id == game_id)
            if expected_phase is None:
                query = query.filter(Game.current_phase.is_(None))
            else:
                query = query.filter(Game.current_phase == expected_phase)
            updated = query.update({
                "current_phase": new_phase,
                "phase_started_at": started_at,
            }, synchronize_session=False)
            return updated == 1

    # ── Players ──────────────────────────────────

    def count_players(self, game_id: int) -> int:
        with self._store_op("count_players"):
            return self.db.query(func.count(Player.id)).filter(Player.game_id == game_id).scalar() or 0

    def list_players(self, game_id: int) -> List[Player]:
        with self._store_op("list_players"):
            return self.db.query(Player).filter(
                Player.game_id == game_id
            ).order_by(Player.join_order).all()

    def get_player(self, game_id: int, player_id: str) -> Optional[Player]:
        with self._store_op("get_player"):
            return self.db.query(Player).filter(
                Player.id == player_id,
                Player.game_id == game_id
            ).first()

    def insert_player(self, game_id: int, player_name: str, join_order: int) -> Player:
        """Raises IntegrityError when join_order is already taken"""
        with self._store_op("insert_player"):
            player = Player(game_id=game_id, player_name=player_name, join_order=join_order, is_connected=True)
            self.db.add(player)
            self.db.flush()
            return player

    # ── Rounds and prompts ───────────────────────

    def get_round(self, game_id: int, round_number: int) -> Optional[Round]:
        with self._store_op("get_round"):
            return self.db.query(Round).options(joinedload(Round.prompt)).filter(
                Round.game_id == game_id,
                Round.round_number == round_number
            ).first()

    def insert_round(self, game_id: int, round_number: int, prompt_id: int, phase: str,
                     started_at: datetime) -> Round:
        """Raises IntegrityError when the round already exists"""
        with self._store_op("insert_round"):
            round_obj = Round(
                game_id=game_id,
                round_number=round_number,
                prompt_id=prompt_id,
                phase=phase,
                phase_started_at=started_at,
            )
            self.db.add(round_obj)
            self.db.flush()
            return round_obj

    def hold_round_phase(self, game_id: int, round_number: int, phase: str) -> bool:
        """No-op conditional update that locks the round row while it is in ``phase``.

        False if the round already moved on. Writes that depend on the phase
        (answers, votes, the advance itself) take this first.
        """
        with self._store_op("hold_round_phase"):
            updated = self.db.query(Round).filter(
                Round.game_id == game_id,
                Round.round_number == round_number,
                Round.phase == phase
            ).update({"phase": Round.phase}, synchronize_session=False)
            return updated == 1

    def update_round_phase(self, game_id: int, round_number: int, expected_phase: str,
                           new_phase: str, started_at: datetime) -> bool:
        """Compare-and-set on the round phase; True only for the caller that moved it"""
        with self._store_op("update_round_phase"):
            updated = self.db.query(Round).filter(
                Round.game_id == game_id,
                Round.round_number == round_number,
                Round.phase == expected_phase
            ).update({
                "phase": new_phase,
                "phase_started_at": started_at,
            }, synchronize_session=False)
            return updated == 1

    def list_prompts_random_pick(self, rng=random) -> Optional[Prompt]:
        """Uniformly random prompt, or None when there are none"""
        with self._store_op("list_prompts_random_pick"):
            total = self.db.query(func.count(Prompt.id)).scalar() or 0
            if total == 0:
                return None
            return self.db.query(Prompt).order_by(Prompt.id).offset(rng.randrange(total)).first()

    # ── Answers ──────────────────────────────────

    def count_answers(self, game_id: int, round_number: int) -> int:
        with self._store_op("count_answers"):
            return self.db.query(func.count(Answer.id)).filter(
                Answer.game_id == game_id,
                Answer.round_number == round_number
            ).scalar() or 0

    def list_answers(self, game_id: int, round_number: int) -> List[Answer]:
        with self._store_op("list_answers"):
            return self.db.query(Answer).options(joinedload(Answer.player)).filter(
                Answer.game_id == game_id,
                Answer.round_number == round_number
            ).order_by(Answer.id).all()

    def get_answer(self, game_id: int, round_number: int, answer_id: int) -> Optional[Answer]:
        with self._store_op("get_answer"):
            return self.db.query(Answer).filter(
                Answer.id == answer_id,
                Answer.game_id == game_id,
                Answer.round_number == round_number
            ).first()

    def upsert_answer(self, game_id: int, round_number: int, player_id: str, answer_text: str) -> Answer:
        """Insert or overwrite the player's answer for the round, keyed on the unique constraint"""
        with self._store_op("upsert_answer"):
            insert = self._native_insert()
            if insert is not None:
                stmt = insert(Answer.__table__).values(
                    game_id=game_id,
                    round_number=round_number,
                    player_id=player_id,
                    answer_text=answer_text,
                )
                stmt = stmt.on_conflict_do_update(
                    index_elements=["game_id", "round_number", "player_id"],
                    set_={"answer_text": stmt.excluded.answer_text, "updated_at": func.now()},
                )
                self.db.execute(stmt)
            else:
                try:
                    with self.db.begin_nested():
                        self.db.add(Answer(
                            game_id=game_id,
                            round_number=round_number,
                            player_id=player_id,
                            answer_text=answer_text,
                        ))
                except IntegrityError:
                    self.db.query(Answer).filter(
                        Answer.game_id == game_id,
                        Answer.round_number == round_number,
                        Answer.player_id == player_id
                    ).update({"answer_text": answer_text}, synchronize_session=False)

            return self.db.query(Answer).populate_existing().filter(
                Answer.game_id == game_id,
                Answer.round_number == round_number,
                Answer.player_id == player_id
            ).one()

    # ── Votes ────────────────────────────────────

    def has_voted(self, game_id: int, round_number: int, voter_id: str) -> bool:
        with self._store_op("has_voted"):
            return self.db.query(Vote.id).filter(
                Vote.game_id == game_id,
                Vote.round_number == round_number,
                Vote.voter_id == voter_id
            ).first() is not None

    def insert_vote_if_absent(self, game_id: int, round_number: int, voter_id: str, answer_id: int) -> bool:
        """Insert-once on (game, round, voter); False when a vote already exists"""
        with self._store_op("insert_vote_if_absent"):
            insert = self._native_insert()
            if insert is not None:
                stmt = insert(Vote.__table__).values(
                    game_id=game_id,
                    round_number=round_number,
                    voter_id=voter_id,
                    voted_for_answer_id=answer_id,
                ).on_conflict_do_nothing(index_elements=["game_id", "round_number", "voter_id"])
                result = self.db.execute(stmt)
                return result.rowcount == 1

            try:
                with self.db.begin_nested():
                    self.db.add(Vote(
                        game_id=game_id,
                        round_number=round_number,
                        voter_id=voter_id,
                        voted_for_answer_id=answer_id,
                    ))
            except IntegrityError:
                return False
            return True

    def tally_votes(self, game_id: int, round_number: int) -> Dict[int, int]:
        """Votes received per answer id for the round"""
        with self._store_op("tally_votes"):
            rows = self.db.query(Vote.voted_for_answer_id, func.count(Vote.id)).filter(
                Vote.game_id == game_id,
                Vote.round_number == round_number
            ).group_by(Vote.voted_for_answer_id).all()
            return {answer_id: count for answer_id, count in rows}
