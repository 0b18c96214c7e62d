"""Campus Events - event registration, on-duty requests and certificates"""

__version__ = "1.0.0"
