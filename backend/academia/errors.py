from __future__ import annotations


class AcademiaError(Exception):
	"""Base class for errors that end up as a panel's display message."""

	def __init__(self, message: str) -> None:
		super().__init__(message)
		self.message = message


class GatewayError(AcademiaError):
	"""Any network or service failure of a generation call."""


class DecodeError(AcademiaError):
	"""A response that is not valid JSON, misses required fields, or carries no media."""


class MicrophonePermissionError(AcademiaError):
	"""The audio source could not be opened because access was refused."""


MICROPHONE_PERMISSION_MESSAGE = "Could not start microphone. Please grant permission."
TRANSCRIPTION_ERROR_MESSAGE = "An error occurred during transcription."
UNKNOWN_ERROR_MESSAGE = "An unknown error occurred."
