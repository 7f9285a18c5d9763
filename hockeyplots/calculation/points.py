from typing import Dict, Iterable, List, Mapping, Optional

from loguru import logger

from hockeyplots.models.enums import GameCategory, IndexPolicy, OutcomeType, TeamNamespace
from hockeyplots.models.errors import MalformedGameError
from hockeyplots.models.feed import FeedBatch
from hockeyplots.models.game import Game, Score
from hockeyplots.models.series import ORIGIN, CumulativeSeries, SeriesPoint, TeamSeries
from hockeyplots.models.team import Team
from hockeyplots.reference.store import ReferenceData
from hockeyplots.storage.base import GameLedger

WIN_POINTS = 2.0
EXTRA_TIME_LOSS_POINTS = 1.0
REGULATION_LOSS_POINTS = 0.0

DEFAULT_BASELINE = 1.0


def derive_points(team_score: int, opponent_score: int, outcome: OutcomeType) -> float:
    """Standings points for one team: 2 for a win, 1 for an OT/SO loss, 0 otherwise."""
    if team_score > opponent_score:
        return WIN_POINTS
    if outcome.reached_extra_time:
        return EXTRA_TIME_LOSS_POINTS
    return REGULATION_LOSS_POINTS


def game_points(game: Game, team: Team, namespace: TeamNamespace) -> Optional[float]:
    """Points the team took from a game, or None if the game has no final score.

    Args:
        game: The game, with team ids in ``namespace``.
        team: The team whose side is being scored.
        namespace: Which of the team's ids the game's team references use.
    """
    if game.score is None:
        return None

    team_id = team.id_in(namespace)
    score: Score = game.score
    if game.home_team_id == team_id:
        this_team_score, opponent_score = score.home, score.away
    elif game.away_team_id == team_id:
        this_team_score, opponent_score = score.away, score.home
    else:
        raise MalformedGameError(
            f"Game {game.api_id} does not involve {team.abbrev} ({namespace.value} id {team_id})"
        )
    return derive_points(this_team_score, opponent_score, score.outcome)


def build_series(
    team: Team,
    games: Iterable[Game],
    namespace: TeamNamespace,
    baseline: float = DEFAULT_BASELINE,
    index_policy: IndexPolicy = IndexPolicy.COMPACT,
) -> CumulativeSeries:
    """Cumulative points above ``baseline`` over the team's games, in the given order.

    The series always starts at (0, 0.0). Unscored games add no point; with
    ``IndexPolicy.SCHEDULE`` they still advance the index so x positions line
    up with schedule slots.
    """
    points: List[SeriesPoint] = [ORIGIN]
    running_total = 0.0
    scored = 0

    for position, game in enumerate(games, start=1):
        game_value = game_points(game, team, namespace)
        if game_value is None:
            continue
        scored += 1
        running_total += game_value - baseline
        index = scored if index_policy is IndexPolicy.COMPACT else position
        points.append(SeriesPoint(index=index, value=running_total))

    return CumulativeSeries(baseline=baseline, points=points)


def games_from_feed(batch: FeedBatch) -> Dict[int, List[Game]]:
    """Regular-season games per team straight from a batch, keyed by feed id.

    Team references in the returned games are feed ids (TeamNamespace.EXTERNAL).
    A malformed game is logged and left out, as the reconciler does.
    """
    games: Dict[int, List[Game]] = {}
    for team_api_id, schedule in batch.schedules.items():
        team_games = []
        for feed_game in schedule.games:
            if feed_game.category is not GameCategory.REGULAR_SEASON:
                continue
            try:
                team_games.append(feed_game.to_game())
            except MalformedGameError as e:
                logger.error(f"Skipping malformed game {feed_game.id}: {e}")
        games[team_api_id] = team_games
    return games


async def load_ledger_games(ledger: GameLedger, reference: ReferenceData) -> Dict[int, List[Game]]:
    """Every team's stored games joined with their scores, keyed by ledger id.

    Team references in the returned games are ledger ids (TeamNamespace.INTERNAL).
    """
    scores = {score.id: score for score in await ledger.all_scores()}
    games: Dict[int, List[Game]] = {}

    for team in reference.teams:
        team_games = []
        for record in await ledger.games_for_team(team.db_id):
            score = None
            if record.score_id is not None:
                stored = scores.get(record.score_id)
                if stored is None:
                    logger.warning(
                        f"Game {record.api_id} references missing score {record.score_id}; treating as unscored"
                    )
                else:
                    score = Score(
                        home=stored.home,
                        away=stored.away,
                        outcome=reference.outcome_type_for_id(stored.last_period_type_id),
                    )
            team_games.append(
                Game(
                    api_id=record.api_id,
                    home_team_id=record.home_team_id,
                    away_team_id=record.away_team_id,
                    game_date=record.game_date,
                    score=score,
                )
            )
        games[team.db_id] = team_games

    return games


def derive_league_series(
    games_by_team: Mapping[int, List[Game]],
    reference: ReferenceData,
    namespace: TeamNamespace,
    baseline: float = DEFAULT_BASELINE,
    index_policy: IndexPolicy = IndexPolicy.COMPACT,
) -> List[TeamSeries]:
    """One TeamSeries per reference team, in reference order.

    ``games_by_team`` is keyed by team id in ``namespace``; teams without
    an entry get an origin-only series.
    """
    league_series = []
    for team in reference.teams:
        team_games = games_by_team.get(team.id_in(namespace), [])
        series = build_series(team, team_games, namespace, baseline, index_policy)
        league_series.append(TeamSeries(team=team, series=series))

    logger.debug(
        f"Derived series for {len(league_series)} teams "
        f"(baseline {baseline}, {index_policy.value} indexing)"
    )
    return league_series
