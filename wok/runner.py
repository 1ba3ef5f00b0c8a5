"""
Web of Knowledge Runner

Plays sessions end to end against a pluggable player.

The runner:
1. Starts a session on the engine
2. Shows the active question or guess to the player
3. Feeds the player's reply back into the engine
4. Loops until the engine reports an outcome
5. Optionally hands the session record to a submission sink

Players are interchangeable: a console player for interactive play, an
oracle player that answers as a secret character for simulation.
"""

import argparse
import json
import os
import time
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, TextIO

from .beliefs import entropy as belief_entropy
from .config import EngineConfig
from .engine import GameEngine
from .errors import UnknownAnswerLiteral
from .knowledge import Character, KnowledgeBase, Question, default_knowledge_path, load_knowledge
from .oracle import CharacterOracle
from .spi.submission_sink import SubmissionError, SubmissionSink
from .state import GameView, SessionState
from .summary import SessionSummary, build_summary

NARRATION = {
    "yes": "The silken thread pulls taut...",
    "no": "The web shifts, discarding errant strands.",
    "maybe": "Ambiguity only thickens the web.",
}
MISS_NARRATION = "The Spider misses... but we spin anew."


@dataclass
class RunResult:
    """Result of one played session."""
    session_id: str
    outcome: str
    termination_reason: str
    revealed_character_name: Optional[str]
    questions_asked: int
    guesses_made: int
    steps_taken: int
    elapsed_time: float
    submitted: Optional[bool] = None
    log_dir: str = ""
    trace: list = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "session_id": self.session_id,
            "outcome": self.outcome,
            "termination_reason": self.termination_reason,
            "revealed_character_name": self.revealed_character_name,
            "questions_asked": self.questions_asked,
            "guesses_made": self.guesses_made,
            "steps_taken": self.steps_taken,
            "elapsed_time": self.elapsed_time,
            "submitted": self.submitted,
            "log_dir": self.log_dir,
            "trace_length": len(self.trace),
        }


class PlayerInterface(ABC):
    """Whoever is thinking of the character."""

    @abstractmethod
    def answer_question(self, question: Question, view: GameView) -> str:
        """Reply yes, no or maybe."""
        pass

    @abstractmethod
    def confirm_guess(self, character: Character, probability: float) -> bool:
        """Say whether the guess is right."""
        pass

    def reset(self) -> None:
        pass


class OraclePlayer(PlayerInterface):
    def __init__(self, oracle: CharacterOracle):
        self.oracle = oracle

    def answer_question(self, question: Question, view: GameView) -> str:
        return self.oracle.answer(question.id)

    def confirm_guess(self, character: Character, probability: float) -> bool:
        return self.oracle.confirm(character.id)


class ConsolePlayer(PlayerInterface):
    def __init__(self, prompt=input):
        self._prompt = prompt

    def answer_question(self, question: Question, view: GameView) -> str:
        counter = f"Question {view.questions_asked + 1} / {view.max_questions}"
        return self._prompt(f"{counter}  {question.text} [yes/no/maybe] ")

    def confirm_guess(self, character: Character, probability: float) -> bool:
        while True:
            reply = self._prompt(
                f"The Spider believes you ponder {character.name}. Is it correct? [y/n] "
            ).strip().lower()
            if reply in {"y", "yes"}:
                return True
            if reply in {"n", "no"}:
                return False


class GameRunner:
    def __init__(
        self,
        player: PlayerInterface,
        knowledge: KnowledgeBase,
        engine: Optional[GameEngine] = None,
        sink: Optional[SubmissionSink] = None,
        verbose: bool = True,
        log_dir: Optional[str] = None,
        run_id: Optional[str] = None,
        pace: float = 0.0,  # seconds between a reply and the next prompt
    ):
        self.player = player
        self.knowledge = knowledge
        self.engine = engine or GameEngine(EngineConfig.from_dict(knowledge.settings))
        self.sink = sink
        self.verbose = verbose
        self.pace = pace
        self.trace: list = []

        self.run_id = run_id or datetime.now().strftime("%Y%m%d-%H%M%S") + "-" + uuid.uuid4().hex[:8]
        self.run_log_dir = ""
        self.log_file: Optional[TextIO] = None
        if log_dir:
            self.run_log_dir = os.path.join(log_dir, self.run_id)
            os.makedirs(self.run_log_dir, exist_ok=True)
            self.log_file = open(os.path.join(self.run_log_dir, "run.log"), "w")

    def _write_log(self, msg: str) -> None:
        if self.log_file:
            self.log_file.write(msg + "\n")
            self.log_file.flush()

    def log(self, msg: str) -> None:
        """Log a message to console and file."""
        timestamped = f"[{datetime.now().strftime('%H:%M:%S.%f')[:-3]}] {msg}"
        self._write_log(timestamped)
        if self.verbose:
            print(f"[WOK] {msg}")

    def run(self) -> RunResult:
        try:
            return self._play()
        finally:
            self._close_log()

    def _close_log(self) -> None:
        if self.log_file:
            self.log_file.close()
            self.log_file = None

    def _play(self) -> RunResult:
        started = time.monotonic()
        cfg = self.engine.config
        self.player.reset()
        self.trace = []

        state = self.engine.start(self.knowledge)
        self.log(f"Session {state.session_id}: {len(self.knowledge.characters)} characters, "
                 f"{len(self.knowledge.questions)} questions")
        # Each step consumes a question or a guess, so this bounds the loop.
        max_steps = cfg.max_questions + cfg.max_guesses

        steps = 0
        while not state.game_over and steps < max_steps:
            steps += 1
            if state.current_question is not None:
                self._ask(state)
            elif state.current_guess is not None:
                self._guess(state)
            if self.pace:
                time.sleep(self.pace)

        view = self.engine.view(state)
        if view.revealed_character_name:
            self.log(f"The web prevailed! {view.revealed_character_name} was captured.")
        else:
            self.log("The Spider could not ensnare the truth.")

        submitted = None
        if self.sink is not None:
            submitted = self._submit(build_summary(state))

        result = RunResult(
            session_id=state.session_id,
            outcome=state.outcome.value if state.outcome else "unfinished",
            termination_reason=(
                state.termination_reason.value if state.termination_reason else "max_steps_reached"
            ),
            revealed_character_name=state.revealed_character_name,
            questions_asked=state.question_count,
            guesses_made=state.guess_count,
            steps_taken=steps,
            elapsed_time=time.monotonic() - started,
            submitted=submitted,
            log_dir=self.run_log_dir,
            trace=self.trace,
        )
        self.log(f"Run Complete: {result.to_dict()}")
        self._save_run_logs(result, state)
        return result

    def _ask(self, state: SessionState) -> None:
        question = state.current_question
        view = self.engine.view(state)
        while True:
            reply = self.player.answer_question(question, view)
            try:
                self.engine.answer(state, question.id, reply)
                break
            except UnknownAnswerLiteral as exc:
                self.log(f"  {exc.message}")
        answer = state.asked[-1].answer.value
        self.trace.append({"question_id": question.id, "answer": answer})
        self.log(f"Q{state.question_count}: {question.text} -> {answer} "
                 f"(entropy {belief_entropy(state.beliefs):.3f} bits)")
        self.log(f"  {NARRATION[answer]}")

    def _guess(self, state: SessionState) -> None:
        character = state.current_guess
        probability = state.beliefs[character.id]
        correct = self.player.confirm_guess(character, probability)
        self.engine.resolve_guess(state, correct)
        self.trace.append({
            "character_id": character.id,
            "probability": probability,
            "correct": correct,
        })
        self.log(f"Guess: {character.name} (p={probability:.3f}) -> "
                 f"{'correct' if correct else 'incorrect'}")
        if not correct and not state.game_over:
            self.log(f"  {MISS_NARRATION}")

    def _submit(self, summary: SessionSummary) -> bool:
        try:
            receipt = self.sink.submit(summary)
        except SubmissionError as exc:
            self.log(f"Submission failed: {exc}")
            return False
        self.log(f"Submitted session record ({receipt.reference})")
        return receipt.accepted

    def _save_run_logs(self, result: RunResult, state: SessionState) -> None:
        if not self.run_log_dir:
            return
        with open(os.path.join(self.run_log_dir, "trace.json"), "w") as f:
            json.dump(self.trace, f, indent=2)
        with open(os.path.join(self.run_log_dir, "result.json"), "w") as f:
            json.dump(result.to_dict(), f, indent=2)
        with open(os.path.join(self.run_log_dir, "summary.json"), "w") as f:
            json.dump(build_summary(state).to_dict(), f, indent=2)
        self._write_log(f"Logs saved to: {self.run_log_dir}")


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(description="Play the Web of Knowledge.")
    parser.add_argument("--knowledge", default=str(default_knowledge_path()))
    parser.add_argument("--secret", help="simulate play as this character id")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--log-dir", default=None)
    parser.add_argument("--submit-url", default=None)
    parser.add_argument("--pace", type=float, default=0.0)
    parser.add_argument("--quiet", action="store_true")
    args = parser.parse_args(argv)

    knowledge = load_knowledge(args.knowledge)
    settings = dict(knowledge.settings)
    if args.seed is not None:
        settings["seed"] = args.seed
    engine = GameEngine(EngineConfig.from_dict(settings))

    if args.secret:
        player: PlayerInterface = OraclePlayer(CharacterOracle(knowledge, args.secret))
    else:
        player = ConsolePlayer()

    sink = None
    if args.submit_url:
        from .sinks.http import HttpSink
        sink = HttpSink(args.submit_url)

    runner = GameRunner(
        player,
        knowledge,
        engine=engine,
        sink=sink,
        verbose=not args.quiet,
        log_dir=args.log_dir,
        pace=args.pace,
    )
    runner.run()


if __name__ == "__main__":
    main()
