import logging
import os
from pathlib import Path

from .config import BEST_SCORE_KEY, DATA_DIR

logger = logging.getLogger(__name__)


class BestScoreStore:
    """Keeps the best score as a decimal integer in a one-line file."""

    def __init__(self, directory=DATA_DIR, key=BEST_SCORE_KEY):
        self.path = Path(directory) / key

    def load(self):
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return 0
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("could not read best score from %s: %s", self.path, exc)
            return 0
        try:
            return max(0, int(text.strip() or "0"))
        except ValueError:
            logger.warning("ignoring malformed best score in %s: %r", self.path, text[:32])
            return 0

    def save(self, score):
        # Written beside the real file and swapped in, so a crash never truncates it
        partial = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            partial.write_text(str(int(score)), encoding="utf-8")
            os.replace(partial, self.path)
        except OSError as exc:
            logger.warning("could not save best score to %s: %s", self.path, exc)
            return False
        return True
