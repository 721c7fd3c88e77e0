#!filepath: progress_display.py
from tqdm import tqdm

class TqdmProgress:
    """
    A percentage progress bar built on tqdm. It redraws one line in place, so
    the terminal shows the latest status rather than a history of updates.
    """
    def __init__(self, description: str = "Encoding"):
        """
        Initializes the tqdm progress bar.

        Args:
            description (str): A short label shown before the bar.
        """
        self.tqdm_bar = tqdm(
            total=100,
            unit='%',
            desc=description,
            bar_format="{l_bar}{bar}| {n:.1f}% [{elapsed}<{remaining}]",
            ncols=80,
        )
        self.percent = 0.0

    def update(self, percent: float):
        """
        Moves the bar to an absolute percentage. Going backwards is ignored.

        Args:
            percent (float): Completion in the range 0-100.
        """
        percent = min(max(percent, 0.0), 100.0)
        if percent > self.percent:
            self.tqdm_bar.update(round(percent - self.percent, 2))
            self.percent = percent

    def finish(self):
        """Closes and cleans up the progress bar."""
        self.tqdm_bar.close()
