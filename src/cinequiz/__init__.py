"""CineQuiz.

Movie trivia game engine: guess a movie from its progressively revealed
cast, or name every film of an actor before the countdown runs out.
"""

__version__ = "0.1.0"
