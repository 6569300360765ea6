import logging
import random
import re
from abc import ABC, abstractmethod
from collections import Counter
from typing import List, Optional

from pydantic import ValidationError

from .backends import GeminiClient, text_part
from .errors import BackendError, InvalidInput
from .glossary import GlossaryManager
from .models import (
    ChoiceQuestion,
    QuestionType,
    Quiz,
    TranslationQuestion,
    WordOrderQuestion,
)

logger = logging.getLogger("textquiz.generators")

NUM_OPTIONS = 4
WORD_COUNT = 5
SENTENCE_COUNT = 3

STOP_WORDS = {
    "about", "after", "again", "also", "been", "before", "being", "between",
    "both", "could", "does", "doing", "down", "each", "from", "have", "having",
    "here", "into", "just", "like", "made", "make", "many", "more", "most",
    "much", "only", "other", "over", "same", "should", "some", "such", "than",
    "that", "their", "them", "then", "there", "these", "they", "this", "those",
    "through", "very", "were", "what", "when", "where", "which", "while", "will",
    "with", "would", "your",
}

_SENTENCE_SPLIT_RE = re.compile(r"(?<=[.!?。！？])\s*|\n+")
_WORD_RE = re.compile(r"[A-Za-z][A-Za-z'-]{3,}")
_VOWEL_GROUP_RE = re.compile(r"[^aeiouy]*[aeiouy]+")
_SILENT_E_RE = re.compile(r"[^aeiouy]*es?")


def split_sentences(text: str) -> List[str]:
    """Sentences with at least three words, in reading order."""
    sentences = []
    for chunk in _SENTENCE_SPLIT_RE.split(text):
        chunk = chunk.strip()
        if chunk and len(chunk.split()) >= 3:
            sentences.append(chunk)
    return sentences


def extract_keywords(text: str, limit: int) -> List[str]:
    """Most frequent content words, ties broken by first appearance."""
    words = [w.lower() for w in _WORD_RE.findall(text)]
    words = [w for w in words if w not in STOP_WORDS]
    counts = Counter(words)
    first_seen = {}
    for index, word in enumerate(words):
        first_seen.setdefault(word, index)
    ranked = sorted(counts, key=lambda w: (-counts[w], first_seen[w]))
    return ranked[:limit]


def split_syllables(word: str) -> List[str]:
    """Rough English syllable split on vowel groups."""
    word = word.lower()
    chunks = _VOWEL_GROUP_RE.findall(word)
    if not chunks:
        return [word]
    tail = word[len("".join(chunks)):]
    chunks[-1] += tail
    # A final silent "e" does not make its own syllable.
    if len(chunks) > 1 and _SILENT_E_RE.fullmatch(chunks[-1]):
        last = chunks.pop()
        chunks[-1] += last
    return chunks


class QuizGenerator(ABC):
    """Abstract Base Class for the quiz generation strategies."""

    @abstractmethod
    async def generate(self, text: str, quiz_type: QuestionType, language: str) -> Quiz:
        pass


class RuleBasedQuizGenerator(QuizGenerator):
    """Builds questions from the text itself, without a language model."""

    def __init__(self, glossary: GlossaryManager, rng: Optional[random.Random] = None):
        self.glossary = glossary
        self.rng = rng or random.Random()

    async def generate(self, text: str, quiz_type: QuestionType, language: str) -> Quiz:
        if quiz_type == QuestionType.VOCABULARY:
            questions = self._vocabulary(text)
        elif quiz_type == QuestionType.WORD_ORDER:
            questions = self._word_order(text)
        elif quiz_type == QuestionType.TRANSLATION:
            questions = self._translation(text)
        else:
            questions = self._reading(text)

        if not questions:
            raise InvalidInput(f"Not enough material to build a {quiz_type.value} quiz")
        logger.info(f"Built {len(questions)} {quiz_type.value} questions offline")
        return Quiz(questions=questions)

    def _choice(self, word: str, answer: str, pool: List[str], explanation: str) -> ChoiceQuestion:
        distractors = [p for p in dict.fromkeys(pool) if p != answer]
        if len(distractors) >= NUM_OPTIONS - 1:
            distractors = self.rng.sample(distractors, NUM_OPTIONS - 1)
        while len(distractors) < NUM_OPTIONS - 1:
            distractors.append(f"Option {len(distractors) + 2}")

        options = [answer] + distractors
        self.rng.shuffle(options)
        return ChoiceQuestion(
            word=word,
            options=options,
            correct=options.index(answer),
            explanation=explanation,
        )

    def _vocabulary(self, text: str) -> List[ChoiceQuestion]:
        keywords = extract_keywords(text, WORD_COUNT)
        sentences = split_sentences(text) or [text]
        questions = []
        for word in keywords:
            meaning = self.glossary.lookup(word)
            if meaning:
                questions.append(
                    self._choice(
                        word,
                        meaning,
                        self.glossary.translations(),
                        f"'{word}' means '{meaning}'.",
                    )
                )
                continue

            # No known meaning: ask for the word missing from its sentence.
            pattern = re.compile(rf"\b{re.escape(word)}\b", re.IGNORECASE)
            context = next((s for s in sentences if pattern.search(s)), None)
            if context is None:
                continue
            cloze = pattern.sub("_____", context, count=1)
            others = extract_keywords(text, WORD_COUNT * 4)
            questions.append(
                self._choice(cloze, word, others, f"The missing word is '{word}'.")
            )
        return questions

    def _word_order(self, text: str) -> List[WordOrderQuestion]:
        questions = []
        for sentence in split_sentences(text)[:SENTENCE_COUNT]:
            tokens = sentence.split()
            shuffled = tokens[:]
            for _ in range(10):
                self.rng.shuffle(shuffled)
                if shuffled != tokens or len(set(tokens)) == 1:
                    break
            questions.append(
                WordOrderQuestion(
                    original=sentence,
                    shuffled=shuffled,
                    answer=sentence,
                    explanation=f"The words form the sentence: {sentence}",
                )
            )
        return questions

    def _translation(self, text: str) -> List[TranslationQuestion]:
        questions = []
        for sentence in split_sentences(text)[:SENTENCE_COUNT]:
            reference = self.glossary.lookup(sentence)
            if reference:
                explanation = "Reference translation from the glossary."
            else:
                reference = sentence
                explanation = (
                    "No reference translation is available offline; "
                    "compare your translation with the original sentence."
                )
            questions.append(
                TranslationQuestion(question=sentence, answer=reference, explanation=explanation)
            )
        return questions

    def _reading(self, text: str) -> List[ChoiceQuestion]:
        questions = []
        for word in extract_keywords(text, WORD_COUNT * 2):
            syllables = split_syllables(word)
            if len(syllables) < 2:
                continue
            variants = []
            for i in range(min(len(syllables), NUM_OPTIONS)):
                marked = syllables[:]
                marked[i] = marked[i].upper()
                variants.append("·".join(marked))
            answer = variants[0]
            options = variants[:]
            self.rng.shuffle(options)
            questions.append(
                ChoiceQuestion(
                    word=word,
                    options=options,
                    correct=options.index(answer),
                    explanation=(
                        f"Stress falls on the first syllable: {answer}. "
                        "This is a rule of thumb; check a dictionary."
                    ),
                )
            )
            if len(questions) == WORD_COUNT:
                break
        return questions


QUIZ_PROMPTS = {
    QuestionType.VOCABULARY: (
        "Pick the 5 most important words in the text below and write a question "
        "asking for the meaning of each.\n"
        "Text: {text}\n\n"
        "Output JSON in this form:\n"
        '{{"questions": [{{"word": "word", "options": ["option 1", "option 2", '
        '"option 3", "option 4"], "correct": 0, "explanation": "explanation"}}]}}'
    ),
    QuestionType.WORD_ORDER: (
        "Pick 3 sentences from the text below and write a word-order question "
        "for each.\n"
        "Text: {text}\n\n"
        "Output JSON in this form:\n"
        '{{"questions": [{{"original": "original sentence", "shuffled": '
        '["word 1", "word 2", "word 3"], "answer": "original sentence", '
        '"explanation": "explanation"}}]}}'
    ),
    QuestionType.TRANSLATION: (
        "Pick 3 sentences from the text below and write a translation question "
        "for each ({direction}).\n"
        "Text: {text}\n\n"
        "Output JSON in this form:\n"
        '{{"questions": [{{"question": "sentence to translate", '
        '"answer": "correct translation", "explanation": "explanation"}}]}}'
    ),
    QuestionType.READING: (
        "Pick 5 words from the text below and write a pronunciation and stress "
        "question for each.\n"
        "Text: {text}\n\n"
        "Output JSON in this form:\n"
        '{{"questions": [{{"word": "word", "options": ["reading 1", "reading 2", '
        '"reading 3", "reading 4"], "correct": 0, "explanation": "explanation"}}]}}'
    ),
}

QUIZ_PREAMBLE = "You are an assistant that writes questions for students.\n\n"
JSON_ONLY = "\n\nOutput JSON only. Do not add any other text."


def build_quiz_prompt(text: str, quiz_type: QuestionType, language: str) -> str:
    direction = "Japanese to English" if language == "ja" else "English to Japanese"
    body = QUIZ_PROMPTS[quiz_type].format(text=text, direction=direction)
    return QUIZ_PREAMBLE + body + JSON_ONLY


class GeminiQuizGenerator(QuizGenerator):
    def __init__(self, gemini: GeminiClient):
        self.gemini = gemini

    async def generate(self, text: str, quiz_type: QuestionType, language: str) -> Quiz:
        prompt = build_quiz_prompt(text, quiz_type, language)
        data = await self.gemini.generate_json([text_part(prompt)])
        try:
            return Quiz.model_validate(data)
        except ValidationError as e:
            raise BackendError("Gemini returned a malformed quiz", details=str(e)) from e


class QuizFactory:
    """Factory to select the generator for the configured backend."""

    @staticmethod
    def create(
        mode: str, glossary: GlossaryManager, gemini: Optional[GeminiClient] = None
    ) -> QuizGenerator:
        if mode == "gemini" and gemini is not None:
            return GeminiQuizGenerator(gemini)
        return RuleBasedQuizGenerator(glossary)
