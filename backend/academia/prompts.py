from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Optional

from . import schemas
from .models import ProgressData
from .schemas import Shape
from .settings import settings


@dataclass(frozen=True)
class PromptedRequest:
	feature: str
	prompt: str
	shape: Optional[Shape] = None
	model: Optional[str] = None


TEMPLATES: Dict[str, str] = {
	"write": "{text}",
	"enhance": "Please enhance the following text for clarity, grammar, and style:\n\n{text}",
	"cite": (
		"Generate a proper academic citation for the following request: {text}. "
		"Provide citations in APA, MLA, and Chicago formats."
	),
	"explain": (
		"Explain the following topic in a clear, concise, and easy-to-understand way "
		"for a high school student:\n\nTopic: \"{text}\""
	),
	"research": (
		"Research the following question using current web sources. Answer it concisely "
		"and mention which sources support each part of the answer.\n\nQuestion: {text}"
	),
	"plagiarism": (
		"Analyze the following text for potential plagiarism by finding highly similar content on the web. "
		"Provide a brief report on your findings and list the URLs of the most relevant sources. "
		"Text:\n\n\"{text}\""
	),
	"slides": (
		"Based on the following text, create a presentation with a title, content points for each slide, "
		"and optional speaker notes. Provide exactly 5 slides.\n\nText: \"{text}\""
	),
	"flashcards": "Create a list of flashcards (term and definition) from the following text:\n\n\"{text}\"",
	"quiz": (
		"Create a multiple-choice quiz with {count} questions based on this text. "
		"For each question, provide 4 options and indicate the correct answer.\n\n\"{text}\""
	),
	"exam": (
		"Create a multiple-choice quiz with {count} questions based on this text. "
		"For each question, provide 4 options and indicate the correct answer.\n\n"
		"\"Generate an exam on the topic: {text}\""
	),
	"study_plan": (
		"Create a detailed study plan for the topic \"{text}\" to be completed in {days} days. "
		"For each day, provide main topics, specific goals, and a simple daily quiz question with an answer."
	),
	"concept_map": (
		"Generate a concept map in markdown format from the following text. "
		"Use indentation with hyphens (-) to show the hierarchy of concepts. "
		"Start with the main topic at the top level.\n\nText: \"{text}\""
	),
	"progress": (
		"A student has completed {completed} out of {total} tasks. "
		"They have been studying the following topics: {text}. "
		"Provide a brief, encouraging, and analytical summary of their progress "
		"and suggest what they could focus on next."
	),
	"analyze_image": "{text}",
	"image": "{text}",
	"speech": "{text}",
	"chat": "{text}",
}

SHAPES: Dict[str, Shape] = {
	"slides": schemas.SLIDES,
	"flashcards": schemas.FLASHCARDS,
	"quiz": schemas.QUIZ,
	"exam": schemas.QUIZ,
	"study_plan": schemas.STUDY_PLAN,
}


def _model_for(feature: str) -> Optional[str]:
	if feature == "study_plan":
		# planning benefits from the stronger model
		return settings.gemini_model_pro
	if feature == "image":
		return settings.image_model
	if feature == "speech":
		return settings.tts_model
	return None


def format_request(feature: str, text: str, **params: object) -> PromptedRequest:
	"""Substitute ``text`` into the feature's template.

	Unknown features raise ``KeyError``; empty input is the caller's job to reject.
	"""
	template = TEMPLATES[feature]
	prompt = template.format(text=text, **params)
	return PromptedRequest(feature=feature, prompt=prompt, shape=SHAPES.get(feature), model=_model_for(feature))


def quiz_request(notes: str, count: Optional[int] = None) -> PromptedRequest:
	return format_request("quiz", notes, count=count or settings.quiz_question_count)


def exam_request(topic: str, count: Optional[int] = None) -> PromptedRequest:
	return format_request("exam", topic, count=count or settings.exam_question_count)


def study_plan_request(topic: str, days: int) -> PromptedRequest:
	return format_request("study_plan", topic, days=days)


def progress_request(data: ProgressData) -> PromptedRequest:
	return format_request(
		"progress",
		", ".join(data.topicsStudied),
		completed=data.tasksCompleted,
		total=data.tasksTotal,
	)
