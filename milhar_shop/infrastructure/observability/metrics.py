"""Prometheus metrics for bet volume, cancellations and logins"""

from prometheus_client import Counter, Histogram

# Bet metrics
bets_placed_counter = Counter(
    "milhar_bets_placed_total",
    "Total bets placed",
    ["game_type"],  # milhar | centena | dezena
)

bets_cancelled_counter = Counter(
    "milhar_bets_cancelled_total",
    "Total bets cancelled by administrators",
)

bet_amount_histogram = Histogram(
    "milhar_bet_amount",
    "Stake per bet in currency units",
    ["game_type"],
    buckets=[0.5, 1, 2, 5, 10, 20, 50, 100, 200, 500],
)

# Session metrics
login_counter = Counter(
    "milhar_login_total",
    "Login attempts",
    ["outcome"],  # success | failure
)


def record_bet(game_type: str, amount: float) -> None:
    bets_placed_counter.labels(game_type=game_type).inc()
    bet_amount_histogram.labels(game_type=game_type).observe(amount)


def record_login(succeeded: bool) -> None:
    login_counter.labels(outcome="success" if succeeded else "failure").inc()
