"""This module drives Gemini calls with retries and model fallback.

Shared inference capacity often answers with transient overload (503) or
rate-limit (429) errors. A call therefore walks an ordered plan of model
identifiers; each model gets a bounded number of attempts with a linear,
capped backoff between retryable failures. A non-retryable failure abandons
the current model at once and moves on to the next one. Only when every model
is exhausted is the last error raised.

The policy is split in two parts that can be tested on their own: the
`ModelSelector`, which walks the plan, and the `BoundedRetry`, which runs the
attempts against a single model.
"""

import time
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from typing import NoReturn, TypeVar

from google.genai import types
from licitasaas.exceptions.analysis import AiConfigurationError
from licitasaas.providers.ai import AiProvider, GenerationOptions
from licitasaas.providers.config import Config
from licitasaas.providers.logging import Logger, LoggingProvider
from pydantic import BaseModel, ConfigDict, Field
from tenacity import RetryCallState, Retrying, retry_if_exception, stop_after_attempt

T = TypeVar("T")

RETRYABLE_STATUS_CODES = (503, 429)


def error_status_code(error: BaseException) -> int | None:
    """Reads the HTTP-like status code carried by a provider error.

    Args:
        error: The raised exception.

    Returns:
        The first integer found in `code`, `status_code` or `status`, or None.
    """
    for attribute in ("code", "status_code", "status"):
        value = getattr(error, attribute, None)
        if isinstance(value, int):
            return value
        if isinstance(value, str) and value.isdigit():
            return int(value)
    return None


def is_retryable_error(error: BaseException) -> bool:
    """Classifies an error as transient (overload or rate limit).

    Args:
        error: The raised exception.

    Returns:
        True for 503 and 429 errors, detected by status code or by message.
    """
    if error_status_code(error) in RETRYABLE_STATUS_CODES:
        return True
    message = str(error)
    return any(str(code) in message for code in RETRYABLE_STATUS_CODES)


def backoff_delay(attempt_index: int, step_seconds: float = 3.0, max_seconds: float = 15.0) -> float:
    """Computes the pause after a retryable failure.

    Args:
        attempt_index: The zero-based index of the attempt that failed.
        step_seconds: The linear increment per attempt.
        max_seconds: The upper bound of the pause.

    Returns:
        `min((attempt_index + 1) * step_seconds, max_seconds)`.
    """
    return min((attempt_index + 1) * step_seconds, max_seconds)


class ModelAttemptPlan(BaseModel):
    """An immutable, ordered list of models with a per-model retry budget.

    Attributes:
        models: The model identifiers, tried in order.
        max_retries_per_model: The number of attempts each model gets.
        backoff_step_seconds: The linear backoff increment.
        backoff_max_seconds: The backoff cap.
    """

    model_config = ConfigDict(frozen=True)

    models: tuple[str, ...] = Field(..., min_length=1)
    max_retries_per_model: int = Field(4, ge=1)
    backoff_step_seconds: float = Field(3.0, ge=0)
    backoff_max_seconds: float = Field(15.0, ge=0)

    @classmethod
    def from_config(cls, config: Config) -> "ModelAttemptPlan":
        """Builds the plan from the application settings.

        Args:
            config: The application configuration.

        Returns:
            The plan described by the `GEMINI_*` settings.
        """
        return cls(
            models=tuple(config.GEMINI_MODELS),
            max_retries_per_model=config.GEMINI_MAX_RETRIES_PER_MODEL,
            backoff_step_seconds=config.GEMINI_BACKOFF_STEP_SECONDS,
            backoff_max_seconds=config.GEMINI_BACKOFF_MAX_SECONDS,
        )


@dataclass
class RetryState:
    """The transient state of the attempts against one model."""

    model: str
    attempt_index: int = 0
    elapsed_backoff: float = 0.0
    last_error: BaseException | None = None
    delays: list[float] = field(default_factory=list)

    @property
    def last_delay_seconds(self) -> float:
        """The pause taken after the latest failure, 0 before any pause."""
        return self.delays[-1] if self.delays else 0.0


class ModelSelector:
    """Walks the models of a plan in order, remembering which were tried."""

    def __init__(self, plan: ModelAttemptPlan) -> None:
        """Initializes the selector.

        Args:
            plan: The plan whose models are walked.
        """
        self.plan = plan
        self.tried: list[str] = []

    def __iter__(self) -> Iterator[str]:
        """Yields each model of the plan once.

        Yields:
            The next model identifier.
        """
        for model in self.plan.models:
            self.tried.append(model)
            yield model


class ModelExhaustedError(Exception):
    """Raised when every attempt against one model has failed.

    Attributes:
        state: The retry state at the moment the model was abandoned.
    """

    def __init__(self, state: RetryState) -> None:
        """Initializes the exception.

        Args:
            state: The final retry state of the model.
        """
        super().__init__(f"Model '{state.model}' exhausted after {state.attempt_index} attempt(s).")
        self.state = state


class BoundedRetry:
    """Runs up to `max_retries_per_model` attempts against a single model.

    The attempts are driven by `tenacity`. A pause is also taken after the
    last retryable failure, before the caller moves to the next model.
    """

    logger: Logger

    def __init__(self, plan: ModelAttemptPlan, sleep: Callable[[float], None] = time.sleep) -> None:
        """Initializes the retry loop.

        Args:
            plan: Supplies the attempt budget and the backoff parameters.
            sleep: The function used to wait between attempts.
        """
        self.logger = LoggingProvider().get_logger()
        self.plan = plan
        self.sleep = sleep

    def run(self, model: str, request: Callable[[str], T]) -> T:
        """Calls the request until it succeeds or the budget is spent.

        Args:
            model: The model identifier passed to the request.
            request: The call to perform.

        Returns:
            The first successful result.

        Raises:
            AiConfigurationError: Immediately, since no retry can fix it.
            ModelExhaustedError: When the model must be abandoned.
        """
        state = RetryState(model=model)
        max_retries = self.plan.max_retries_per_model

        def wait(retry_state: RetryCallState) -> float:
            return backoff_delay(
                retry_state.attempt_number - 1, self.plan.backoff_step_seconds, self.plan.backoff_max_seconds
            )

        def pause(delay: float) -> None:
            delay = float(delay)
            self.sleep(delay)
            state.delays.append(delay)
            state.elapsed_backoff += delay

        def before(retry_state: RetryCallState) -> None:
            state.attempt_index = retry_state.attempt_number
            self.logger.info(f"[Gemini] Trying model '{model}' (attempt {state.attempt_index}/{max_retries})")

        def before_sleep(retry_state: RetryCallState) -> None:
            error = retry_state.outcome.exception() if retry_state.outcome else None
            state.last_error = error
            delay = retry_state.next_action.sleep if retry_state.next_action else 0.0
            self.logger.warning(
                f"[Gemini] {error_status_code(error) or '503/429'} error on '{model}', "
                f"retrying in {delay:.1f}s... (attempt {retry_state.attempt_number}/{max_retries})"
            )

        def exhausted(retry_state: RetryCallState) -> NoReturn:
            state.last_error = retry_state.outcome.exception() if retry_state.outcome else None
            delay = wait(retry_state)
            self.logger.warning(
                f"[Gemini] {error_status_code(state.last_error) or '503/429'} error on '{model}', "
                f"waiting {delay:.1f}s before giving up on it (attempt {retry_state.attempt_number}/{max_retries})"
            )
            pause(delay)
            raise ModelExhaustedError(state) from state.last_error

        retrying = Retrying(
            sleep=pause,
            stop=stop_after_attempt(max_retries),
            wait=wait,
            retry=retry_if_exception(is_retryable_error),
            before=before,
            before_sleep=before_sleep,
            retry_error_callback=exhausted,
        )

        try:
            return retrying(request, model)
        except (AiConfigurationError, ModelExhaustedError):
            raise
        except Exception as e:
            state.last_error = e
            self.logger.error(f"[Gemini] Non-retryable error on '{model}': {e}")
            raise ModelExhaustedError(state) from e


class GenerativeCallExecutor:
    """Issues Gemini calls across a model plan with bounded retries."""

    logger: Logger

    def __init__(self, ai_provider: AiProvider, sleep: Callable[[float], None] = time.sleep) -> None:
        """Initializes the executor.

        Args:
            ai_provider: The provider performing single generation calls.
            sleep: The function used to wait between attempts.
        """
        self.logger = LoggingProvider().get_logger()
        self.ai_provider = ai_provider
        self.sleep = sleep

    def call(
        self,
        plan: ModelAttemptPlan,
        contents: list[types.Content],
        options: GenerationOptions,
    ) -> types.GenerateContentResponse:
        """Generates content, falling back across the models of the plan.

        Args:
            plan: The ordered models and their retry budget.
            contents: The conversation turns to send.
            options: The generation settings.

        Returns:
            The first successful response.

        Raises:
            AiConfigurationError: When the provider is not configured.
            Exception: The last provider error, once every model is exhausted.
        """
        return self.run(plan, lambda model: self.ai_provider.generate(model, contents, options))

    def run(self, plan: ModelAttemptPlan, request: Callable[[str], T]) -> T:
        """Applies the retry and fallback policy to an arbitrary request.

        Args:
            plan: The ordered models and their retry budget.
            request: Called with a model identifier for each attempt.

        Returns:
            The first successful result.

        Raises:
            AiConfigurationError: When the provider is not configured.
            Exception: The last error observed, once every model is exhausted.
        """
        retry = BoundedRetry(plan, self.sleep)
        last_error: BaseException | None = None

        for model in ModelSelector(plan):
            try:
                return retry.run(model, request)
            except ModelExhaustedError as e:
                last_error = e.state.last_error
                self.logger.warning(f"[Gemini] All retries exhausted for model '{model}', trying next model...")

        if last_error is None:  # pragma: no cover
            raise RuntimeError("No model attempt was made.")
        raise last_error
