from .rider import Rider
from .judge import Judge
from .judge_score import JudgeScore
from .audience_vote import AudienceVote
from .contest_settings import ContestSettings, SETTINGS_ID
from .log_entry import LogEntry, LOG_TYPES
