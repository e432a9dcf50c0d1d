# Math Snake player GUI: Tkinter presentation layer driving the engine once per frame.
from __future__ import annotations

import logging
import time
import tkinter as tk

# Support both package imports and running this file directly.
try:
    from .game_logic import (
        DOWN,
        LEFT,
        RIGHT,
        UP,
        EventKind,
        GameEvent,
        InvalidAnswer,
        MathSnakeGame,
        SnakeConfig,
    )
    from .math_problems import MathProblemGenerator
    from .rendering import RenderSnapshot
except ImportError:
    from game_logic import (
        DOWN,
        LEFT,
        RIGHT,
        UP,
        EventKind,
        GameEvent,
        InvalidAnswer,
        MathSnakeGame,
        SnakeConfig,
    )
    from math_problems import MathProblemGenerator
    from rendering import RenderSnapshot


logger = logging.getLogger(__name__)

# (name, head, body) indexed by the engine's theme index.
SNAKE_THEMES = (
    ("Purple-Green", "#7C3AED", "#10B981"),
    ("Red-Orange", "#DC2626", "#F59E0B"),
    ("Blue-Cyan", "#2563EB", "#06B6D4"),
    ("Green-Violet", "#059669", "#8B5CF6"),
    ("Pink-Orange", "#DB2777", "#F97316"),
    ("Brown-Lime", "#7C2D12", "#65A30D"),
    ("Dark-Red", "#1F2937", "#EF4444"),
    ("Gold-Blue", "#FBBF24", "#3B82F6"),
)


class SnakeApp:
    """Tkinter presentation layer for MathSnakeGame."""
    UI_SCALE = 1.2
    FRAME_MS = 16
    MESSAGE_MS = 3000
    BG = "#101418"
    BOARD_BG = "#16213e"
    SIDEBAR_BG = "#0f1720"
    GRID_COLOR = "#24304a"
    TARGET_FILL = "#FFD700"
    TARGET_RING = "#FF6B9D"
    TEXT_PRIMARY = "#e6eef7"
    TEXT_MUTED = "#95a4b8"
    ACCENT = "#42c4ff"
    BORDER_COLOR = "#7f8b99"
    MESSAGE_COLORS = {
        "success": "#48bb78",
        "error": "#e53e3e",
        "warning": "#ed8936",
        "info": "#4299e1",
    }

    def __init__(self, root: tk.Tk) -> None:
        self.root = root
        self.root.title("Math Snake Adventure")
        self.root.configure(bg=self.BG)
        self.root.tk.call("tk", "scaling", self.UI_SCALE)

        self.config = SnakeConfig()
        self.problems = MathProblemGenerator()
        self.game = MathSnakeGame(self.config, problem_source=self.problems)
        self.game.add_listener(self.on_game_event)
        self.after_id: str | None = None      # Tkinter timer id for the frame loop
        self.message_after_id: str | None = None
        self.last_frame_at = time.perf_counter()

        self._build_layout()
        self._bind_keys()
        self._apply_canvas_size()
        self.draw(self.game.snapshot())
        self.frame()

    def _s(self, value: int) -> int:
        """Scale pixel/font values for better readability."""
        return int(round(value * self.UI_SCALE))

    def _build_layout(self) -> None:
        """Create game canvas + right sidebar panels."""
        self.root.columnconfigure(0, weight=1)
        self.root.rowconfigure(0, weight=1)

        container = tk.Frame(self.root, bg=self.BG)
        container.grid(row=0, column=0, sticky="nsew", padx=self._s(16), pady=self._s(16))
        container.columnconfigure(0, weight=1)
        container.columnconfigure(1, weight=0)
        container.rowconfigure(0, weight=1)

        self.canvas = tk.Canvas(container, bg=self.BOARD_BG, highlightthickness=0, bd=0)
        self.canvas.grid(row=0, column=0, sticky="nsew", padx=(0, self._s(16)))

        self.sidebar = tk.Frame(container, bg=self.SIDEBAR_BG, width=self._s(360))
        self.sidebar.grid(row=0, column=1, sticky="ns")
        self.sidebar.grid_propagate(False)

        title = tk.Label(
            self.sidebar,
            text="Math Snake",
            fg=self.TEXT_PRIMARY,
            bg=self.SIDEBAR_BG,
            font=("Helvetica", self._s(16), "bold"),
        )
        title.pack(anchor="w", padx=self._s(16), pady=(self._s(16), self._s(6)))

        subtitle = tk.Label(
            self.sidebar,
            text="Solve the problem to guide the snake",
            fg=self.TEXT_MUTED,
            bg=self.SIDEBAR_BG,
            font=("Helvetica", self._s(10)),
        )
        subtitle.pack(anchor="w", padx=self._s(16), pady=(0, self._s(14)))

        self._build_status()
        self._build_problem()
        self._build_buttons()

    def _section(self, text: str) -> tk.LabelFrame:
        frame = tk.LabelFrame(
            self.sidebar,
            text=text,
            fg=self.TEXT_PRIMARY,
            bg=self.SIDEBAR_BG,
            bd=1,
            font=("Helvetica", self._s(10), "bold"),
            labelanchor="n",
        )
        frame.pack(fill="x", padx=self._s(16), pady=(0, self._s(14)))
        return frame

    def _build_status(self) -> None:
        """Top sidebar section with live score/level/lives/run-state labels."""
        frame = self._section("Status")
        self.score_var = tk.StringVar(value="Score: 0")
        self.level_var = tk.StringVar(value="Level: 1")
        self.lives_var = tk.StringVar(value=f"Lives: {self.config.initial_lives}")
        self.state_var = tk.StringVar(value="State: Ready")

        for var in (self.score_var, self.level_var, self.lives_var, self.state_var):
            tk.Label(
                frame,
                textvariable=var,
                fg=self.TEXT_PRIMARY,
                bg=self.SIDEBAR_BG,
                font=("Helvetica", self._s(11)),
                anchor="w",
            ).pack(fill="x", padx=self._s(10), pady=self._s(4))

    def _build_problem(self) -> None:
        """Current problem, difficulty label, and the answer box."""
        frame = self._section("Problem")
        self.problem_var = tk.StringVar(value=self.game.target.problem.prompt)
        self.difficulty_var = tk.StringVar(value="")

        tk.Label(
            frame,
            textvariable=self.problem_var,
            fg=self.TEXT_PRIMARY,
            bg=self.SIDEBAR_BG,
            justify="left",
            wraplength=self._s(300),
            font=("Helvetica", self._s(15), "bold"),
        ).pack(anchor="w", padx=self._s(10), pady=self._s(6))
        tk.Label(
            frame,
            textvariable=self.difficulty_var,
            fg=self.TEXT_MUTED,
            bg=self.SIDEBAR_BG,
            justify="left",
            wraplength=self._s(300),
            font=("Helvetica", self._s(9)),
        ).pack(anchor="w", padx=self._s(10), pady=(0, self._s(6)))

        row = tk.Frame(frame, bg=self.SIDEBAR_BG)
        row.pack(fill="x", padx=self._s(10), pady=self._s(6))
        self.answer_var = tk.StringVar()
        self.answer_entry = tk.Entry(
            row,
            textvariable=self.answer_var,
            width=10,
            justify="center",
            bd=0,
            relief="flat",
            bg="#e8eef5",
            fg="#1a2734",
            font=("Helvetica", self._s(12)),
        )
        self.answer_entry.pack(side="left", fill="x", expand=True, padx=(0, self._s(8)))
        self.answer_entry.bind("<Return>", lambda _e: self.submit_answer())
        self._button(row, "Submit", self.submit_answer).pack(side="right")

        self.message_label = tk.Label(
            frame,
            text="",
            fg=self.TEXT_PRIMARY,
            bg=self.SIDEBAR_BG,
            justify="left",
            wraplength=self._s(300),
            font=("Helvetica", self._s(10), "bold"),
        )
        self.message_label.pack(anchor="w", padx=self._s(10), pady=(0, self._s(8)))
        self._refresh_difficulty()

    def _build_buttons(self) -> None:
        """Action buttons for start/pause/restart."""
        frame = tk.Frame(self.sidebar, bg=self.SIDEBAR_BG)
        frame.pack(fill="x", padx=self._s(16), pady=(0, self._s(10)))

        self.start_btn = self._button(frame, "Start Game", self.start_game)
        self.start_btn.pack(fill="x", pady=self._s(4))

        self.pause_btn = self._button(frame, "Pause", self.toggle_pause)
        self.pause_btn.pack(fill="x", pady=self._s(4))

        self.restart_btn = self._button(frame, "Restart", self.restart_game)
        self.restart_btn.pack(fill="x", pady=self._s(4))

        footer = tk.Label(
            self.sidebar,
            text="Steer: Arrow keys  |  Pause: Space/Esc  |  Restart: Ctrl+R",
            fg=self.TEXT_MUTED,
            bg=self.SIDEBAR_BG,
            wraplength=self._s(320),
            font=("Helvetica", self._s(9)),
        )
        footer.pack(anchor="w", padx=self._s(16), pady=(self._s(4), self._s(10)))
        self._refresh_buttons()

    def _button(self, parent: tk.Widget, text: str, command) -> tk.Button:
        return tk.Button(
            parent,
            text=text,
            command=command,
            fg="#09141f",
            bg=self.ACCENT,
            activebackground="#74d8ff",
            activeforeground="#09141f",
            bd=0,
            relief="flat",
            font=("Helvetica", self._s(11), "bold"),
            padx=self._s(12),
            pady=self._s(7),
            cursor="hand2",
        )

    def _bind_keys(self) -> None:
        """Arrow keys steer; letter keys stay with the answer box."""
        self.root.bind("<Up>", lambda _e: self.game.queue_heading(UP))
        self.root.bind("<Down>", lambda _e: self.game.queue_heading(DOWN))
        self.root.bind("<Left>", lambda _e: self.game.queue_heading(LEFT))
        self.root.bind("<Right>", lambda _e: self.game.queue_heading(RIGHT))
        self.root.bind("<space>", self._on_pause_key)
        self.root.bind("<Escape>", self._on_pause_key)
        self.root.bind("<Control-r>", lambda _e: self.restart_game())

    def _on_pause_key(self, _event: tk.Event) -> str:
        if self.game.state.running:
            self.toggle_pause()
        return "break"

    def _apply_canvas_size(self) -> None:
        """Resize board canvas to match current grid + tile size."""
        cell = self.config.cell_size
        self.canvas.configure(width=self.config.width * cell, height=self.config.height * cell)

    # --------------------------------------------------------------- commands

    def start_game(self) -> None:
        if self.game.state.game_over:
            self.game.restart()
            self._reset_problem_panel()
        self.game.start()
        self.answer_entry.focus_set()
        self.show_message("Game Started! Solve the math problem to help the snake!", "success")
        self._refresh_buttons()

    def toggle_pause(self) -> None:
        self.game.pause()
        self.show_message("Game Paused" if self.game.state.paused else "Game Resumed", "info")
        self._refresh_buttons()

    def restart_game(self) -> None:
        self.game.restart()
        self._reset_problem_panel()
        self.show_message("Game Restarted! Good luck!", "info")
        self._refresh_buttons()

    def submit_answer(self) -> None:
        expected = self.game.target.problem.answer
        try:
            correct = self.game.submit_answer(self.answer_var.get())
        except InvalidAnswer as exc:
            self.show_message(str(exc), "warning")
            self.answer_entry.focus_set()
            return

        if correct:
            self.answer_var.set("")
            self.show_message("Correct! Snake is heading to eat the problem!", "success")
        else:
            self.show_message(f"Wrong answer! Correct answer was {expected}", "error")
        self.answer_entry.focus_set()

    def on_game_event(self, event: GameEvent) -> None:
        """React to engine events: messages and problem refresh."""
        if event.kind is EventKind.TARGET_REACHED:
            self.problem_var.set(self.game.target.problem.prompt)
            self.answer_var.set("")
        elif event.kind is EventKind.LEVEL_UP:
            self._refresh_difficulty()
            self.show_message(f"Level up! Now at level {self.game.state.level}", "success")
        elif event.kind in (EventKind.WALL_COLLISION, EventKind.SELF_COLLISION):
            what = "wall" if event.kind is EventKind.WALL_COLLISION else "own tail"
            self.show_message(f"Ouch! The snake hit its {what}.", "warning")
        elif event.kind is EventKind.GAME_OVER:
            self.show_message(f"Game Over! Final score: {self.game.state.score}", "error")
            self._refresh_buttons()

    def show_message(self, text: str, kind: str = "info") -> None:
        if self.message_after_id is not None:
            self.root.after_cancel(self.message_after_id)
        self.message_label.configure(text=text, fg=self.MESSAGE_COLORS.get(kind, self.TEXT_PRIMARY))
        self.message_after_id = self.root.after(self.MESSAGE_MS, self._clear_message)

    def _clear_message(self) -> None:
        self.message_after_id = None
        self.message_label.configure(text="")

    def _reset_problem_panel(self) -> None:
        """Show the fresh target and level-1 difficulty after a restart."""
        self.answer_var.set("")
        self.problem_var.set(self.game.target.problem.prompt)
        self._refresh_difficulty()

    def _refresh_difficulty(self) -> None:
        name, description = self.problems.difficulty_info()
        self.difficulty_var.set(f"{name}: {description}")

    def _refresh_buttons(self) -> None:
        state = self.game.state
        if state.running:
            self.start_btn.configure(text="Running...", state="disabled")
            self.pause_btn.configure(text="Resume" if state.paused else "Pause", state="normal")
        else:
            self.start_btn.configure(text="Start Game", state="normal")
            self.pause_btn.configure(text="Pause", state="disabled")

    # ------------------------------------------------------------- frame loop

    def frame(self) -> None:
        """Single display frame; always reschedules itself."""
        now = time.perf_counter()
        elapsed_ms = (now - self.last_frame_at) * 1000.0
        self.last_frame_at = now

        snap = self.game.advance(elapsed_ms)
        self.draw(snap)
        self.after_id = self.root.after(self.FRAME_MS, self.frame)

    def draw(self, snap: RenderSnapshot) -> None:
        """Render board, target, interpolated snake, status labels, and overlays."""
        self.canvas.delete("all")
        cell = self.config.cell_size
        width = self.config.width * cell
        height = self.config.height * cell

        for x in range(self.config.width + 1):
            self.canvas.create_line(x * cell, 0, x * cell, height, fill=self.GRID_COLOR)
        for y in range(self.config.height + 1):
            self.canvas.create_line(0, y * cell, width, y * cell, fill=self.GRID_COLOR)
        self.canvas.create_rectangle(1, 1, width - 1, height - 1, outline=self.BORDER_COLOR, width=2)

        if snap.target_cell is not None:
            tx, ty = snap.target_cell
            cx, cy = tx * cell + cell / 2, ty * cell + cell / 2
            radius = cell * 0.9
            self.canvas.create_oval(
                cx - radius, cy - radius, cx + radius, cy + radius,
                fill=self.TARGET_FILL, outline=self.TARGET_RING, width=3,
            )
            self.canvas.create_text(cx, cy, text="?", fill="#2d3748", font=("Helvetica", self._s(14), "bold"))

        _, head_color, body_color = SNAKE_THEMES[snap.theme_index % len(SNAKE_THEMES)]
        # Tail first so the head is drawn on top.
        for idx in range(len(snap.positions) - 1, -1, -1):
            gx, gy = snap.positions[idx]
            inset = 2 if idx == 0 else 3
            x1, y1 = gx * cell + inset, gy * cell + inset
            x2, y2 = (gx + 1) * cell - inset, (gy + 1) * cell - inset
            color = head_color if idx == 0 else body_color
            self.canvas.create_oval(x1, y1, x2, y2, fill=color, outline="")

        self.score_var.set(f"Score: {snap.score}")
        self.level_var.set(f"Level: {snap.level}")
        self.lives_var.set(f"Lives: {snap.lives}")
        if snap.game_over:
            self.state_var.set("State: Game Over")
        elif snap.paused:
            self.state_var.set("State: Paused")
        elif snap.running:
            self.state_var.set("State: Running")
        else:
            self.state_var.set("State: Ready")

        if snap.paused:
            self._overlay(width, height, "PAUSED", "Press Space to resume")
        elif snap.game_over:
            self._overlay(width, height, "Game Over", f"Final score {snap.score} - press Restart")

    def _overlay(self, width: int, height: int, title: str, subtitle: str) -> None:
        self.canvas.create_rectangle(0, 0, width, height, fill="#000000", stipple="gray50", outline="")
        self.canvas.create_text(
            width // 2,
            height // 2 - 12,
            text=title,
            fill=self.TEXT_PRIMARY,
            font=("Helvetica", 22, "bold"),
        )
        self.canvas.create_text(
            width // 2,
            height // 2 + 20,
            text=subtitle,
            fill=self.TEXT_MUTED,
            font=("Helvetica", 12),
        )


def run_player_gui() -> None:
    """Launch the Math Snake player interface."""
    root = tk.Tk()
    SnakeApp(root)
    root.mainloop()


if __name__ == "__main__":
    run_player_gui()
