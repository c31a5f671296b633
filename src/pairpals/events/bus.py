from blinker import Signal
from typing import Dict

class EventBus:
    """Simple event bus leveraging blinker Signal objects."""
    def __init__(self):
        self._signals: Dict[str, Signal] = {}

    def subscribe(self, name: str, fn):
        sig = self._signals.setdefault(name, Signal(name))
        # Use weak=False to retain strong reference to bound methods so systems not kept in a variable still receive events.
        sig.connect(fn, weak=False)

    def unsubscribe(self, name: str, fn):
        sig = self._signals.get(name)
        if sig:
            sig.disconnect(fn)

    def emit(self, name: str, **payload):
        sig = self._signals.get(name)
        if sig:
            sig.send(self, **payload)


# ============================================================================
# SYSTEM & TIMING
# ============================================================================
EVENT_TICK = "tick"                                # payload: dt=float (seconds)
EVENT_COUNTDOWN_TICK = "countdown_tick"            # payload: time_left=int, elapsed=int


# ============================================================================
# INPUT & INTERACTION
# ============================================================================
EVENT_TILE_CLICK = "tile_click"                    # payload: tile_id=int
EVENT_HINT_REQUEST = "hint_request"                # payload: none


# ============================================================================
# TILE & BOARD MECHANICS
# ============================================================================
EVENT_BOARD_READY = "board_ready"                  # payload: tile_ids=list[int], pair_count=int, columns=int
EVENT_TILE_FLIPPED = "tile_flipped"                # payload: tile_id=int, pending=list[int]
EVENT_MOVE_COUNTED = "move_counted"                # payload: moves=int, tile_ids=(int,int)
EVENT_PAIR_RESOLVE = "pair_resolve"                # payload: tile_ids=(int,int), session_id=int
EVENT_PAIR_MATCHED = "pair_matched"                # payload: tile_ids=(int,int), content_ref=str, matches=int
EVENT_PAIR_MISSED = "pair_missed"                  # payload: tile_ids=(int,int)
EVENT_MATCH_ANIMATION_END = "match_animation_end"  # payload: tile_ids=(int,int), session_id=int


# ============================================================================
# HINTS
# ============================================================================
EVENT_HINT_SHOWN = "hint_shown"                    # payload: tile_ids=(int,int), remaining=int
EVENT_HINT_EXPIRE = "hint_expire"                  # payload: session_id=int
EVENT_HINT_CLEARED = "hint_cleared"                # payload: none


# ============================================================================
# SCORE & TIMER
# ============================================================================
EVENT_SCORE_CHANGED = "score_changed"              # payload: score=int, delta=int, streak=int, strikes=int, reason=str
EVENT_STRIKE_PENALTY = "strike_penalty"            # payload: score=int, delta=int


# ============================================================================
# GAME FLOW & STATE
# ============================================================================
EVENT_GAME_MODE_CHANGED = "game_mode_changed"              # payload: previous_mode=GameMode|None, new_mode=GameMode
EVENT_CUSTOM_CONTENT_ADDED = "custom_content_added"        # payload: refs=list[str]
EVENT_MENU_START_SELECTED = "menu_start_selected"          # payload: player_name=str, difficulty=Difficulty|None
EVENT_NEW_GAME_REQUEST = "new_game_request"                # payload: none
EVENT_DIFFICULTY_CHANGED = "difficulty_changed"            # payload: difficulty=Difficulty
EVENT_RESTART_REQUEST = "restart_request"                  # payload: none
EVENT_SESSION_STARTED = "session_started"                  # payload: session_id=int, difficulty=Difficulty, pair_count=int
EVENT_SESSION_ENDED = "session_ended"                      # payload: session_id=int, reason=str
EVENT_GAME_WON = "game_won"                                # payload: session_id=int, score=int, moves=int, elapsed=int
EVENT_GAME_OVER = "game_over"                              # payload: session_id=int, reason=str, score=int, high_score=int


# ============================================================================
# LEADERBOARD
# ============================================================================
EVENT_LEADERBOARD_UPDATED = "leaderboard_updated"          # payload: entries=list[ScoreEntry]
EVENT_LEADERBOARD_CLEAR_REQUEST = "leaderboard_clear_request"  # payload: confirmed=bool
