"""Evaluation report data models."""
from dataclasses import dataclass
from typing import List, Optional


@dataclass
class ReadabilityScore:
    """Crude readability figures for one response."""
    response_index: int  # 1-based
    word_count: int
    sentence_count: int
    avg_words_per_sentence: float
    readability_grade: float


@dataclass
class SimilarityScore:
    """Word-set overlap between one response and its ground truth."""
    response_index: int  # 1-based
    jaccard_similarity: float
    common_words: int
    response_unique_words: int
    truth_unique_words: int


@dataclass
class OverallScore:
    consistency: float
    completeness: float
    relevance: float


@dataclass
class EvaluationReport:
    """Stateless report computed fresh for every evaluate() call."""
    response_count: int
    avg_response_length: float
    total_words: int
    unique_words: int
    readability_scores: List[ReadabilityScore]
    similarity_analysis: Optional[List[SimilarityScore]]
    overall_score: OverallScore
