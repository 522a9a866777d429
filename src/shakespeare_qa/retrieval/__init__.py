"""Retrieval module for the Shakespeare Q&A service."""

from .ranker import RelevanceRanker, RankMode, RankResult, Fragment, rank
from .context import PromptComposer, PromptStyle
from .retriever import PassageRetriever

__all__ = [
    'RelevanceRanker',
    'RankMode',
    'RankResult',
    'Fragment',
    'rank',
    'PromptComposer',
    'PromptStyle',
    'PassageRetriever'
]
