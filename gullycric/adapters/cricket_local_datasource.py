"""
Local cricket data source

Persists matches, teams, players and innings as JSON lists in a key-value
store. Innings live under their own key and are attached to matches on read.
All storage problems surface as CacheException.
"""

import json
from typing import Callable, Dict, List, Optional, Type, TypeVar

from loguru import logger
from pydantic import BaseModel, ValidationError

from ..domain.common.exceptions import CacheException
from ..domain.models.match import MatchDomain
from ..domain.models.player import PlayerDomain
from ..domain.models.score import InningDomain
from ..domain.models.team import TeamDomain
from .key_value_store import KeyValueStore

MATCHES_KEY = "cricket_matches"
TEAMS_KEY = "cricket_teams"
PLAYERS_KEY = "cricket_players"
INNINGS_KEY = "cricket_innings"
SEEDED_KEY = "cricket_seeded"

M = TypeVar("M", bound=BaseModel)


class CricketLocalDataSource:
    def __init__(self, store: KeyValueStore):
        self.store = store

    # Generic list helpers

    def _read(self, key: str, model: Type[M]) -> List[M]:
        raw = self.store.get_string(key)
        if not raw:
            return []
        try:
            items = json.loads(raw)
        except json.JSONDecodeError as e:
            raise CacheException(f"Corrupt data under '{key}': {e}")
        try:
            return [model.model_validate(item) for item in items]
        except (ValidationError, TypeError) as e:
            raise CacheException(f"Invalid {model.__name__} data under '{key}': {e}")

    def _write(self, key: str, items: List[BaseModel], exclude=None) -> None:
        payload = [item.model_dump(mode="json", exclude=exclude) for item in items]
        self.store.set_string(key, json.dumps(payload))

    def _upsert(self, key: str, model: Type[M], item: M, exclude=None) -> None:
        items = [existing for existing in self._read(key, model) if existing.id != item.id]
        items.append(item)
        self._write(key, items, exclude=exclude)

    def _replace(self, key: str, model: Type[M], item: M, label: str, exclude=None) -> None:
        items = self._read(key, model)
        for i, existing in enumerate(items):
            if existing.id == item.id:
                items[i] = item
                self._write(key, items, exclude=exclude)
                return
        raise CacheException(f"{label} not found for update")

    def _delete(self, key: str, model: Type[M], predicate: Callable[[M], bool]) -> int:
        items = self._read(key, model)
        kept = [item for item in items if not predicate(item)]
        if len(kept) != len(items):
            self._write(key, kept)
        return len(items) - len(kept)

    # Matches

    def _attach_innings(self, matches: List[MatchDomain]) -> List[MatchDomain]:
        by_match: Dict[str, List[InningDomain]] = {}
        for inning in self._read(INNINGS_KEY, InningDomain):
            by_match.setdefault(inning.match_id, []).append(inning)
        return [
            match.model_copy(
                update={
                    "innings": sorted(
                        by_match.get(match.id, []), key=lambda i: i.inning_number
                    )
                }
            )
            for match in matches
        ]

    def get_matches(self) -> List[MatchDomain]:
        return self._attach_innings(self._read(MATCHES_KEY, MatchDomain))

    def get_match(self, match_id: str) -> Optional[MatchDomain]:
        return next((m for m in self.get_matches() if m.id == match_id), None)

    def save_match(self, match: MatchDomain) -> None:
        self._upsert(MATCHES_KEY, MatchDomain, match, exclude={"innings"})
        for inning in match.innings:
            self.save_inning(inning)

    def save_matches(self, matches: List[MatchDomain]) -> None:
        existing = {m.id: m for m in self._read(MATCHES_KEY, MatchDomain)}
        existing.update({m.id: m for m in matches})
        self._write(MATCHES_KEY, list(existing.values()), exclude={"innings"})
        for match in matches:
            for inning in match.innings:
                self.save_inning(inning)

    def update_match(self, match: MatchDomain) -> None:
        self._replace(MATCHES_KEY, MatchDomain, match, "Match", exclude={"innings"})
        for inning in match.innings:
            self.save_inning(inning)

    def delete_match(self, match_id: str) -> bool:
        removed = self._delete(MATCHES_KEY, MatchDomain, lambda m: m.id == match_id)
        self.clear_match_data(match_id)
        return removed > 0

    # Innings

    def get_match_innings(self, match_id: str) -> List[InningDomain]:
        innings = [i for i in self._read(INNINGS_KEY, InningDomain) if i.match_id == match_id]
        return sorted(innings, key=lambda i: i.inning_number)

    def save_inning(self, inning: InningDomain) -> None:
        self._upsert(INNINGS_KEY, InningDomain, inning)

    # Teams

    def get_teams(self) -> List[TeamDomain]:
        return self._read(TEAMS_KEY, TeamDomain)

    def get_team(self, team_id: str) -> Optional[TeamDomain]:
        return next((t for t in self.get_teams() if t.id == team_id), None)

    def save_team(self, team: TeamDomain) -> None:
        self._upsert(TEAMS_KEY, TeamDomain, team)

    def update_team(self, team: TeamDomain) -> None:
        self._replace(TEAMS_KEY, TeamDomain, team, "Team")

    def delete_team(self, team_id: str) -> bool:
        return self._delete(TEAMS_KEY, TeamDomain, lambda t: t.id == team_id) > 0

    # Players

    def get_players(self) -> List[PlayerDomain]:
        return self._read(PLAYERS_KEY, PlayerDomain)

    def get_player(self, player_id: str) -> Optional[PlayerDomain]:
        return next((p for p in self.get_players() if p.id == player_id), None)

    def save_player(self, player: PlayerDomain) -> None:
        self._upsert(PLAYERS_KEY, PlayerDomain, player)

    def save_players(self, players: List[PlayerDomain]) -> None:
        existing = {p.id: p for p in self.get_players()}
        existing.update({p.id: p for p in players})
        self._write(PLAYERS_KEY, list(existing.values()))

    def update_player(self, player: PlayerDomain) -> None:
        self._replace(PLAYERS_KEY, PlayerDomain, player, "Player")

    def delete_player(self, player_id: str) -> bool:
        return self._delete(PLAYERS_KEY, PlayerDomain, lambda p: p.id == player_id) > 0

    # Housekeeping

    def is_seeded(self) -> bool:
        return self.store.get_string(SEEDED_KEY) == "true"

    def mark_seeded(self) -> None:
        self.store.set_string(SEEDED_KEY, "true")

    def clear_match_data(self, match_id: str) -> None:
        removed = self._delete(INNINGS_KEY, InningDomain, lambda i: i.match_id == match_id)
        if removed:
            logger.debug(f"Removed {removed} innings for match {match_id}")

    def clear_cache(self) -> None:
        for key in (MATCHES_KEY, TEAMS_KEY, PLAYERS_KEY, INNINGS_KEY, SEEDED_KEY):
            self.store.remove(key)
        logger.info("🧹 Cleared local cricket data")
