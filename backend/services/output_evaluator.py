"""Output evaluator for response quality metrics."""
import logging
import re
from typing import List, Optional, Sequence

from models.evaluation import EvaluationReport, OverallScore, ReadabilityScore, SimilarityScore
from services.errors import InvalidArgument

logger = logging.getLogger(__name__)


class OutputEvaluator:
    """
    Scores model responses with simple text heuristics.

    None of these are validated metrics: the readability grade is a crude
    words-per-sentence proxy and the overall scores use fixed constants.
    """

    SENTENCE_BOUNDARY = re.compile(r"[.!?]+")

    # Grade = words per sentence minus offset, clamped to the range below
    GRADE_OFFSET = 5
    MIN_GRADE = 1.0
    MAX_GRADE = 12.0

    # Concatenated response length treated as fully complete
    COMPLETENESS_LENGTH = 1000

    PAIRED_RELEVANCE = 0.8
    UNPAIRED_RELEVANCE = 0.3
    DEFAULT_RELEVANCE = 0.7

    def evaluate(
        self,
        responses: Sequence[str],
        ground_truths: Optional[Sequence[str]] = None
    ) -> EvaluationReport:
        """
        Evaluate responses, optionally against ground truths.

        Args:
            responses: Model responses, in order
            ground_truths: Reference answers; response i is paired with truth i,
                falling back to the first truth when there are fewer truths

        Returns:
            EvaluationReport with readability, similarity and overall scores

        Raises:
            InvalidArgument: If no responses are given
        """
        if not responses:
            raise InvalidArgument("Model responses are required")

        truths = list(ground_truths or [])
        word_counts = [self._word_count(r) for r in responses]

        report = EvaluationReport(
            response_count=len(responses),
            avg_response_length=sum(len(r) for r in responses) / len(responses),
            total_words=sum(word_counts),
            unique_words=len(set(" ".join(responses).split())),
            readability_scores=[
                self._readability(index, response)
                for index, response in enumerate(responses, start=1)
            ],
            similarity_analysis=self._similarity_analysis(responses, truths) if truths else None,
            overall_score=OverallScore(
                consistency=self._consistency(responses),
                completeness=min(1.0, len("".join(responses)) / self.COMPLETENESS_LENGTH),
                relevance=self._relevance(responses, truths)
            )
        )

        logger.info(
            f"Evaluated {len(responses)} responses against {len(truths)} ground truths"
        )
        return report

    @staticmethod
    def _word_count(text: str) -> int:
        return len(text.split())

    def _sentence_count(self, text: str) -> int:
        return len([s for s in self.SENTENCE_BOUNDARY.split(text) if s.strip()])

    def _readability(self, index: int, response: str) -> ReadabilityScore:
        words = self._word_count(response)
        sentences = self._sentence_count(response)
        avg_words_per_sentence = words / max(sentences, 1)
        grade = max(self.MIN_GRADE, min(self.MAX_GRADE, avg_words_per_sentence - self.GRADE_OFFSET))

        return ReadabilityScore(
            response_index=index,
            word_count=words,
            sentence_count=sentences,
            avg_words_per_sentence=avg_words_per_sentence,
            readability_grade=grade
        )

    @staticmethod
    def _pair(truths: List[str], index: int) -> str:
        return truths[index] if index < len(truths) else truths[0]

    def _similarity_analysis(self, responses: Sequence[str], truths: List[str]) -> List[SimilarityScore]:
        scores = []
        for index, response in enumerate(responses):
            truth = self._pair(truths, index)
            response_words = set(response.lower().split())
            truth_words = set(truth.lower().split())

            intersection = response_words & truth_words
            union = response_words | truth_words

            scores.append(SimilarityScore(
                response_index=index + 1,
                jaccard_similarity=len(intersection) / len(union) if union else 0.0,
                common_words=len(intersection),
                response_unique_words=len(response_words) - len(intersection),
                truth_unique_words=len(truth_words) - len(intersection)
            ))
        return scores

    @staticmethod
    def _consistency(responses: Sequence[str]) -> float:
        """Share of responses that repeat an earlier one."""
        if len(responses) <= 1:
            return 1.0
        return 1 - (len(set(responses)) / len(responses))

    def _relevance(self, responses: Sequence[str], truths: List[str]) -> float:
        if not truths:
            return self.DEFAULT_RELEVANCE

        total = 0.0
        for index, response in enumerate(responses):
            truth = self._pair(truths, index)
            total += self.PAIRED_RELEVANCE if response and truth else self.UNPAIRED_RELEVANCE
        return total / len(responses)
