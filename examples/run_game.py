from wok import GameEngine, load_knowledge
from wok.config import EngineConfig
from wok.knowledge import default_knowledge_path
from wok.oracle import CharacterOracle
from wok.sinks import InMemorySink
from wok.summary import build_summary


def main() -> None:
    knowledge = load_knowledge(str(default_knowledge_path()))
    engine = GameEngine(EngineConfig.from_dict({**knowledge.settings, "seed": 7}))
    oracle = CharacterOracle(knowledge, "sherlock_holmes")
    sink = InMemorySink()

    state = engine.start(knowledge)
    while not state.game_over:
        if state.current_question is not None:
            question = state.current_question
            engine.answer(state, question.id, oracle.answer(question.id))
        else:
            engine.resolve_guess(state, oracle.confirm(state.current_guess.id))

    sink.submit(build_summary(state))
    print("outcome:", state.outcome.value, state.revealed_character_name)
    print("questions:", [entry.question_id for entry in state.asked])
    print("records:", len(sink.records))


if __name__ == "__main__":
    main()
