"""Motion analysis engine: frame ingestion, mode control and state publication."""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterable
from dataclasses import replace
from typing import Any

from proprio_core.analysis.feedback import haptic_cue, stability_below_threshold
from proprio_core.analysis.gait import ANKLES, GaitAnalyzer
from proprio_core.analysis.tremor import TremorAnalyzer
from proprio_core.core.config import Settings, get_settings
from proprio_core.core.exceptions import (
    AnalysisError,
    LowConfidenceError,
    ProcessingFailedError,
)
from proprio_core.core.logging import get_logger
from proprio_core.core.types import (
    AnalysisMode,
    EngineState,
    HapticCue,
    Joint,
    KeypointObservation,
)

logger = get_logger(__name__)

StateCallback = Callable[[EngineState], None]


class MotionAnalysisEngine:
    """Stateful pipeline turning keypoint frames into motion metrics.

    Coordinates:
    - Confidence gating of incoming observations
    - Tremor analysis (Fine Motor mode)
    - Step detection and gait metrics (Gait Assistance mode)
    - Error classification and state publication

    Each mode keeps its own buffers; switching mode never reads or
    writes the other mode's samples. Published state is an immutable
    EngineState replaced as a whole under a lock, and subscribers get
    every new snapshot.

    Frames must come from a single producer. Reading `state` is safe
    from any thread.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        """Initialize engine with settings.

        Args:
            settings: Engine settings (uses defaults if None)
        """
        self.settings = settings or get_settings()
        analysis = self.settings.analysis

        self._tremor = TremorAnalyzer(self.settings.tremor, analysis.window_size)
        self._gait = GaitAnalyzer(
            self.settings.gait,
            window_size=analysis.window_size,
            sample_rate_hz=analysis.sample_rate_hz,
        )

        self._lock = threading.RLock()
        self._state = EngineState()
        self._subscribers: list[StateCallback] = []
        self._stale_frames = 0
        self._closed = False

    @property
    def state(self) -> EngineState:
        """Current published snapshot."""
        return self._state

    @property
    def tremor_samples(self) -> tuple[float, ...]:
        """Buffered tremor coordinate samples, oldest first."""
        with self._lock:
            return tuple(self._tremor.window)

    @property
    def stale_frames(self) -> int:
        """Consecutive frames without a qualifying sample."""
        return self._stale_frames

    @property
    def needs_guidance(self) -> bool:
        """Whether gait stability is below the guidance threshold."""
        return stability_below_threshold(
            self._state, self.settings.haptic.stability_guidance_threshold
        )

    def relevant_joints(self, mode: AnalysisMode | None = None) -> tuple[Joint, ...]:
        """Joints analyzed in a mode (the current mode if None)."""
        mode = mode or self._state.current_mode
        if mode == AnalysisMode.TREMOR:
            return (self.settings.tremor.joint,)
        return tuple(ANKLES.values())

    def haptic_cue(self) -> HapticCue:
        """Intensity and tempo for the haptic subsystem."""
        return haptic_cue(self._state, self.settings.haptic)

    # ------------------------------------------------------------------
    # Lifecycle and mode control
    # ------------------------------------------------------------------

    def start_analysis(self) -> None:
        """Begin processing frames. Existing buffers are kept."""
        with self._lock:
            if self._closed:
                logger.warning("Cannot start analysis on a closed engine")
                return
            if self._state.is_active:
                return
            self._publish(is_active=True)
            logger.info("Motion analysis started (%s)", self._state.current_mode.value)

    def stop_analysis(self) -> None:
        """Stop processing frames. Buffers are kept so analysis can resume."""
        with self._lock:
            if not self._state.is_active:
                return
            self._publish(is_active=False)
            logger.info("Motion analysis stopped")

    def set_mode(self, mode: AnalysisMode) -> None:
        """Switch the active analysis mode.

        Args:
            mode: New analysis mode
        """
        with self._lock:
            if mode == self._state.current_mode:
                return
            self._stale_frames = 0
            self._publish(current_mode=mode)
            logger.info("Analysis mode set to %s", mode.value)

    def reset_metrics(self) -> None:
        """Clear all buffers and restore default metrics.

        Activity and mode are preserved.
        """
        with self._lock:
            self._tremor.reset()
            self._gait.reset()
            self._stale_frames = 0
            self._replace_state(
                EngineState(
                    is_active=self._state.is_active,
                    current_mode=self._state.current_mode,
                )
            )
            logger.info("Metrics reset")

    def report_error(self, error: AnalysisError) -> None:
        """Record an error detected outside the engine (e.g. camera loss).

        Args:
            error: Classified error to publish as `last_error`

        Raises:
            TypeError: If error is not an AnalysisError
        """
        if not isinstance(error, AnalysisError):
            raise TypeError(f"Expected AnalysisError, got {type(error).__name__}")

        with self._lock:
            self._publish(last_error=error)
        logger.warning("Error reported: %s", error.message)

    def subscribe(self, callback: StateCallback) -> Callable[[], None]:
        """Register a callback for every new state snapshot.

        Args:
            callback: Called with the new EngineState

        Returns:
            Function that removes the subscription
        """
        with self._lock:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    def close(self) -> None:
        """Stop analysis and release subscribers."""
        with self._lock:
            if self._closed:
                return
            self.stop_analysis()
            self._subscribers.clear()
            self._closed = True
            logger.info("Motion analysis engine closed")

    # ------------------------------------------------------------------
    # Frame processing
    # ------------------------------------------------------------------

    def process_frame(self, observations: Iterable[KeypointObservation]) -> AnalysisError | None:
        """Process one frame of keypoint observations.

        Never raises for bad input: failures are classified, stored in
        `last_error` and returned, and the engine stays usable.

        Args:
            observations: Keypoints detected in this frame

        Returns:
            The error recorded for this frame, or None on success
        """
        with self._lock:
            if not self._state.is_active:
                return None

            frame_before = self._gait.frame
            try:
                samples = self._gate(observations)
                if not samples:
                    return self._handle_stale_frame()

                self._stale_frames = 0
                if self._state.current_mode == AnalysisMode.TREMOR:
                    self._update_tremor(samples)
                else:
                    self._update_gait(samples)
                return None

            except ProcessingFailedError as e:
                return self._record_failure(e, frame_before)
            except Exception as e:
                return self._record_failure(ProcessingFailedError(e), frame_before)

    def _gate(
        self, observations: Iterable[KeypointObservation]
    ) -> dict[Joint, KeypointObservation]:
        """Validate observations and keep confident ones for the current mode.

        Returns:
            Qualifying observations keyed by joint

        Raises:
            ProcessingFailedError: If any observation is malformed
        """
        if observations is None:
            raise ProcessingFailedError(ValueError("No observations supplied"))

        relevant = self.relevant_joints()
        threshold = self.settings.analysis.confidence_threshold
        samples: dict[Joint, KeypointObservation] = {}

        for obs in observations:
            if not isinstance(obs, KeypointObservation):
                raise ProcessingFailedError(
                    TypeError(f"Expected KeypointObservation, got {type(obs).__name__}")
                )
            in_range = all(0.0 <= v <= 1.0 for v in (obs.x, obs.y, obs.confidence))
            if not obs.is_finite or not in_range:
                raise ProcessingFailedError(ValueError(f"Invalid observation for {obs.joint.name}"))

            if obs.joint not in relevant or obs.confidence < threshold:
                continue

            current = samples.get(obs.joint)
            if current is None or obs.confidence > current.confidence:
                samples[obs.joint] = obs

        return samples

    def _handle_stale_frame(self) -> AnalysisError | None:
        """Count a frame without qualifying samples; metrics keep their values."""
        if self._state.current_mode == AnalysisMode.GAIT:
            self._gait.skip_frame()

        self._stale_frames += 1
        limit = self.settings.analysis.low_confidence_frames
        if self._stale_frames < limit:
            return None

        error = LowConfidenceError(self._stale_frames)
        if self._stale_frames == limit:
            logger.warning("No confident keypoints for %d frames", self._stale_frames)
        self._publish(last_error=error)
        return error

    def _update_tremor(self, samples: dict[Joint, KeypointObservation]) -> None:
        amplitude = self._tremor.update(samples[self.settings.tremor.joint])
        self._publish(
            tremor_amplitude=amplitude,
            tremor_trend=self._tremor.trend,
            last_error=None,
        )

    def _update_gait(self, samples: dict[Joint, KeypointObservation]) -> None:
        self._gait.update(samples)
        metrics = self._gait.metrics
        self._publish(
            gait_stability_index=metrics.stability_index,
            gait_symmetry_index=metrics.symmetry_index,
            session_step_count=metrics.step_count,
            cadence_spm=metrics.cadence_spm,
            last_error=None,
        )

    def _record_failure(
        self, error: ProcessingFailedError, frame_before: int
    ) -> ProcessingFailedError:
        # A skipped frame still takes up time on the gait clock
        if self._state.current_mode == AnalysisMode.GAIT and self._gait.frame == frame_before:
            self._gait.skip_frame()
        logger.error("Frame skipped: %s", error.message)
        self._publish(last_error=error)
        return error

    # ------------------------------------------------------------------
    # State publication
    # ------------------------------------------------------------------

    def _publish(self, **changes: Any) -> None:
        self._replace_state(replace(self._state, **changes))

    def _replace_state(self, state: EngineState) -> None:
        self._state = state
        for callback in list(self._subscribers):
            try:
                callback(state)
            except Exception:
                logger.exception("State subscriber failed")

    def __enter__(self) -> MotionAnalysisEngine:
        """Context manager entry."""
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        """Context manager exit."""
        self.close()
