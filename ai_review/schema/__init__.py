from .review_run import ReviewRun

__all__ = ["ReviewRun"]
