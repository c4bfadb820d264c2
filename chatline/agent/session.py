"""Session state — transcript and running statistics, plus their console rendering."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class Turn:
    speaker: str                    # "User" | "Bot"
    text: str


@dataclass
class SessionStats:
    exchanges: int = 0
    total_latency: float = 0.0      # seconds, summed over completed exchanges

    @property
    def average_latency(self) -> float:
        if self.exchanges == 0:
            return 0.0
        return self.total_latency / self.exchanges

    def record(self, latency: float) -> None:
        self.exchanges += 1
        self.total_latency += latency


@dataclass
class SessionState:
    """
    Everything one chat session accumulates. Owned by the loop and handed to each
    turn explicitly; turns are only ever appended as a User/Bot pair.
    """

    transcript: list[Turn] = field(default_factory=list)
    stats: SessionStats = field(default_factory=SessionStats)

    def record_exchange(self, user_text: str, reply: str, latency: float) -> None:
        self.transcript.append(Turn("User", user_text))
        self.transcript.append(Turn("Bot", reply))
        self.stats.record(latency)


def format_timestamp(moment: datetime) -> str:
    """ctime-style stamp, e.g. 'Mon Oct 19 14:03:11 2026'."""
    return moment.strftime("%a %b %d %H:%M:%S %Y")


def format_statistics(stats: SessionStats) -> str:
    return "\n".join([
        "Chat Statistics:",
        f"- Total Conversations: {stats.exchanges}",
        f"- Average Response Time: {stats.average_latency:.3f} seconds",
    ])


def format_transcript(transcript: list[Turn], moment: datetime) -> str:
    # Every line carries the same print-time stamp, not the time the turn happened.
    stamp = format_timestamp(moment)
    lines = ["Conversation History:"]
    lines.extend(f"[{stamp}] {turn.speaker}: {turn.text}" for turn in transcript)
    return "\n".join(lines)
