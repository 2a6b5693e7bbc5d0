from __future__ import annotations
from typing import List, Literal, Optional
from pydantic import BaseModel, Field


class Slide(BaseModel):
	title: str
	content: List[str]
	speakerNotes: Optional[str] = None


class Flashcard(BaseModel):
	term: str
	definition: str


class QuizQuestion(BaseModel):
	question: str
	options: List[str]
	correctAnswer: str


class StudyPlanQuiz(BaseModel):
	question: str
	answer: str


class StudyPlanDay(BaseModel):
	day: int
	topics: List[str]
	goals: List[str]
	quiz: StudyPlanQuiz


class StudyPlan(BaseModel):
	topic: str
	durationDays: int
	dailyTasks: List[StudyPlanDay]


class ChatMessage(BaseModel):
	role: Literal["user", "model"]
	content: str


class GroundingReference(BaseModel):
	kind: Literal["web", "maps"]
	uri: str
	title: Optional[str] = None

	@property
	def label(self) -> str:
		return self.title or self.uri


class Task(BaseModel):
	id: int
	title: str
	dueDate: str
	completed: bool = False


class ProgressData(BaseModel):
	tasksCompleted: int = Field(default=8, ge=0)
	tasksTotal: int = Field(default=12, ge=0)
	topicsStudied: List[str] = Field(default_factory=lambda: ["Calculus", "American Revolution", "Organic Chemistry"])


class Location(BaseModel):
	latitude: float
	longitude: float
