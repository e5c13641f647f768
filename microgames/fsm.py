from __future__ import annotations

from statemachine import State, StateMachine

from microgames.core.state import SessionPhase, SessionState


class SessionFSM(StateMachine):
    """FSM wrapper around SessionState.

    Guards which phase transitions are legal; lives, score and screen loading
    are handled by the orchestrator.
    """

    startup = State(SessionPhase.startup.value, value=SessionPhase.startup.value, initial=True)
    command = State(SessionPhase.command.value, value=SessionPhase.command.value)
    microgame = State(SessionPhase.microgame.value, value=SessionPhase.microgame.value)
    game_over = State(SessionPhase.game_over.value, value=SessionPhase.game_over.value)

    begin = startup.to(command) | game_over.to(command) | microgame.to(command) | command.to.itself()
    play_round = command.to(microgame)
    next_command = microgame.to(command) | command.to.itself()
    end = command.to(game_over) | microgame.to(game_over) | game_over.to.itself()
    quit = command.to(startup) | microgame.to(startup) | game_over.to(startup) | startup.to.itself()

    def __init__(self, session: SessionState):
        self.session = session
        super().__init__(start_value=session.phase.value)

    def sync_phase_to_model(self) -> None:
        self.session.phase = SessionPhase(str(self.current_state.value))
