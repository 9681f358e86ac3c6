"""Main window: hosts the countdown engine and drives its ticks."""

from __future__ import annotations

import logging
import math

from PyQt6.QtCore import Qt, QTimer, QElapsedTimer, pyqtSignal
from PyQt6.QtGui import QAction, QIcon, QImage, QPainter, QColor, QPixmap, QPen, QKeySequence
from PyQt6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QLabel, QLineEdit,
    QPushButton, QSystemTrayIcon, QMenu, QApplication,
)

from .timer.engine import CountdownEngine, TimerState, TICK_INTERVAL_MS
from .timer.formatting import format_clock, format_menu_bar
from .settings import Settings, load_settings, save_settings
from .audio.sounds import SoundManager
from .notifications import TrayNotifier


logger = logging.getLogger(__name__)

# Pie steps per full circle; the tray icon is redrawn only when the step changes
TRAY_PIE_STEPS = 60


# ── tray‑icon image generation ────────────────────────────────────────────


def _make_tray_icon(state: TimerState, fraction_left: float) -> QIcon:
    """Generate a monochrome template icon for the macOS menu bar.

    - IDLE:       circle outline with the remaining share as a pie
    - RUNNING:    same pie, thicker rim
    - COMPLETED:  filled circle
    """
    size = 64  # draw at 2× for Retina
    img = QImage(size, size, QImage.Format.Format_ARGB32_Premultiplied)
    img.fill(Qt.GlobalColor.transparent)
    p = QPainter(img)
    p.setRenderHint(QPainter.RenderHint.Antialiasing)
    colour = QColor(0, 0, 0, 220)  # template image: macOS tints automatically

    cx, cy, r = size // 2, size // 2, size // 2 - 4

    if state == TimerState.COMPLETED:
        p.setPen(Qt.PenStyle.NoPen)
        p.setBrush(colour)
        p.drawEllipse(cx - r, cy - r, r * 2, r * 2)
    else:
        rim = 6 if state == TimerState.RUNNING else 4
        p.setPen(QPen(colour, rim))
        p.setBrush(Qt.BrushStyle.NoBrush)
        p.drawEllipse(cx - r, cy - r, r * 2, r * 2)
        if fraction_left > 0:
            p.setPen(Qt.PenStyle.NoPen)
            p.setBrush(colour)
            inner = r - 8
            # Qt angles are 1/16 degree, counter-clockwise from 3 o'clock
            p.drawPie(
                cx - inner, cy - inner, inner * 2, inner * 2,
                90 * 16, -int(360 * 16 * fraction_left),
            )

    p.end()
    img.setDevicePixelRatio(2.0)
    return QIcon(QPixmap.fromImage(img))


class TimerInput(QLineEdit):
    """Line edit that reports Up/Down for history recall."""

    history_up = pyqtSignal()
    history_down = pyqtSignal()

    def keyPressEvent(self, event) -> None:  # type: ignore[override]
        key = event.key()
        if key == Qt.Key.Key_Up:
            self.history_up.emit()
            event.accept()
            return
        if key == Qt.Key.Key_Down:
            self.history_down.emit()
            event.accept()
            return
        super().keyPressEvent(event)


class CountdownWindow(QMainWindow):
    """Main application window."""

    def __init__(
        self,
        *,
        settings: Settings | None = None,
        sound_manager: SoundManager | None = None,
    ) -> None:
        super().__init__()
        self.setWindowTitle("CountDown")
        self.setMinimumSize(300, 220)

        # ── settings ──────────────────────────────────────────────────
        self._settings: Settings = settings or load_settings()

        # ── collaborators ─────────────────────────────────────────────
        self._sound_manager = sound_manager or SoundManager(parent=self)
        self._sound_manager.set_volume(self._settings.sound_volume)
        self._sound_manager.set_enabled(self._settings.sound_enabled)

        self._tray_icon = QSystemTrayIcon(self)
        self._tray_icon.setIcon(_make_tray_icon(TimerState.IDLE, 0.0))
        self._tray_icon_key: tuple[TimerState, int] = (TimerState.IDLE, 0)
        self._tray_icon.setToolTip(format_menu_bar(0))
        self._notifier = TrayNotifier(
            self._tray_icon, enabled=self._settings.notifications_enabled,
        )

        # ── engine ────────────────────────────────────────────────────
        self._engine = CountdownEngine(
            self,
            notifier=self._notifier,
            sound_player=self._sound_manager,
            alert_sound=self._settings.completion_sound,
        )

        # ── host loop: the engine has no timer of its own ─────────────
        self._elapsed = QElapsedTimer()
        self._elapsed.start()
        self._host_timer = QTimer(self)
        self._host_timer.setInterval(TICK_INTERVAL_MS)
        self._host_timer.timeout.connect(self._on_host_tick)

        # ── central widget ────────────────────────────────────────────
        central = QWidget()
        self.setCentralWidget(central)
        layout = QVBoxLayout(central)
        layout.setContentsMargins(16, 12, 16, 12)
        layout.setSpacing(8)

        self._input = TimerInput(central)
        self._input.setPlaceholderText("e.g. 25, 1h 30m, add 5m")
        layout.addWidget(self._input)

        self._clock_label = QLabel(format_clock(0), central)
        self._clock_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._clock_label.setStyleSheet("font-size: 36px; font-weight: 700;")
        layout.addWidget(self._clock_label)

        self._completion_label = QLabel("", central)
        self._completion_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._completion_label)

        buttons = QHBoxLayout()
        self._start_btn = QPushButton("Start", central)
        self._start_btn.clicked.connect(self._engine.toggle)
        self._reset_btn = QPushButton("Reset", central)
        self._reset_btn.clicked.connect(self._engine.reset)
        buttons.addWidget(self._start_btn)
        buttons.addWidget(self._reset_btn)
        layout.addLayout(buttons)

        self._status_label = QLabel("", central)
        self._status_label.setWordWrap(True)
        self._status_label.setStyleSheet("color: gray;")
        layout.addWidget(self._status_label)

        # ── tray + native menu ────────────────────────────────────────
        self._build_tray_menu()
        self._build_menu_bar()

        # ── wire signals ──────────────────────────────────────────────
        self._input.textEdited.connect(self._on_text_edited)
        self._input.returnPressed.connect(self._engine.submit)
        self._input.history_up.connect(self._engine.history_previous)
        self._input.history_down.connect(self._engine.history_next)

        self._engine.tick_updated.connect(self._on_tick)
        self._engine.state_changed.connect(self._on_state_changed)
        self._engine.status_changed.connect(self._status_label.setText)
        self._engine.input_text_changed.connect(self._input.setText)
        self._engine.completed.connect(self._on_completed)

        # ── restore window state ──────────────────────────────────────
        self._restore_geometry()
        self._apply_settings()
        self._host_timer.start()

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC
    # ══════════════════════════════════════════════════════════════════

    @property
    def engine(self) -> CountdownEngine:
        return self._engine

    @property
    def settings(self) -> Settings:
        return self._settings

    # ══════════════════════════════════════════════════════════════════
    #  HOST LOOP
    # ══════════════════════════════════════════════════════════════════

    def _on_host_tick(self) -> None:
        delta = self._elapsed.restart() / 1000.0
        self._engine.tick(delta)

    # ══════════════════════════════════════════════════════════════════
    #  ENGINE SIGNALS
    # ══════════════════════════════════════════════════════════════════

    def _on_text_edited(self, text: str) -> None:
        self._engine.input_text = text

    def _on_tick(self, remaining: float) -> None:
        self._clock_label.setText(format_clock(remaining))
        self._refresh_tray()

    def _on_state_changed(self, state: TimerState) -> None:
        if state == TimerState.RUNNING:
            # Don't charge the time spent idle to the first tick
            self._elapsed.restart()
            self._start_btn.setText("Pause")
            self._tray_start_action.setText("Pause")
        else:
            self._start_btn.setText("Start")
            self._tray_start_action.setText("Start")
        self._completion_label.setText(self._engine.completion_message)
        self._refresh_tray()

    def _on_completed(self) -> None:
        logger.info("Countdown finished")
        self._show_window()

    def _refresh_tray(self) -> None:
        engine = self._engine
        fraction_left = 1.0 - engine.percent_complete if engine.target > 0 else 0.0
        step = math.ceil(fraction_left * TRAY_PIE_STEPS)
        key = (engine.state, step)
        if key != self._tray_icon_key:
            self._tray_icon_key = key
            self._tray_icon.setIcon(_make_tray_icon(engine.state, step / TRAY_PIE_STEPS))
        self._tray_icon.setToolTip(format_menu_bar(engine.remaining))

    # ══════════════════════════════════════════════════════════════════
    #  SYSTEM TRAY
    # ══════════════════════════════════════════════════════════════════

    def _build_tray_menu(self) -> None:
        """Create the context menu for the tray icon."""
        menu = QMenu(self)

        self._tray_start_action = menu.addAction("Start")
        self._tray_start_action.triggered.connect(self._engine.toggle)

        reset_action = menu.addAction("Reset")
        reset_action.triggered.connect(self._engine.reset)

        menu.addSeparator()

        show_action = menu.addAction("Show CountDown")
        show_action.triggered.connect(self._show_window)

        menu.addSeparator()

        quit_action = menu.addAction("Quit")
        quit_action.triggered.connect(self._quit_app)

        self._tray_icon.setContextMenu(menu)
        self._tray_icon.activated.connect(self._on_tray_activated)

    def _on_tray_activated(self, reason: QSystemTrayIcon.ActivationReason) -> None:
        """Left-click on tray icon → show the window."""
        if reason == QSystemTrayIcon.ActivationReason.Trigger:
            self._show_window()

    def _show_window(self) -> None:
        self.show()
        self.raise_()
        self.activateWindow()

    def _quit_app(self) -> None:
        self._save_geometry()
        self._host_timer.stop()
        self._tray_icon.hide()
        QApplication.instance().quit()

    # ══════════════════════════════════════════════════════════════════
    #  NATIVE MENU BAR
    # ══════════════════════════════════════════════════════════════════

    def _build_menu_bar(self) -> None:
        menu_bar = self.menuBar()
        app_menu = menu_bar.addMenu("CountDown")

        prefs_action = QAction("Settings…", self)
        prefs_action.setMenuRole(QAction.MenuRole.PreferencesRole)
        prefs_action.setShortcut(QKeySequence("Ctrl+,"))
        prefs_action.triggered.connect(self._open_settings)
        app_menu.addAction(prefs_action)

        quit_action = QAction("Quit CountDown", self)
        quit_action.setMenuRole(QAction.MenuRole.QuitRole)
        quit_action.setShortcut(QKeySequence("Ctrl+Q"))
        quit_action.triggered.connect(self._quit_app)
        app_menu.addAction(quit_action)

        timer_menu = menu_bar.addMenu("Timer")
        toggle_action = QAction("Start/Pause", self)
        toggle_action.triggered.connect(self._engine.toggle)
        timer_menu.addAction(toggle_action)
        reset_action = QAction("Reset", self)
        reset_action.triggered.connect(self._engine.reset)
        timer_menu.addAction(reset_action)

    # ══════════════════════════════════════════════════════════════════
    #  SETTINGS
    # ══════════════════════════════════════════════════════════════════

    def _open_settings(self) -> None:
        from .ui.settings_dialog import SettingsDialog

        dlg = SettingsDialog(
            self._settings,
            self,
            sound_names=self._sound_manager.sound_names(),
            sound_preview_callback=self._sound_manager.play,
        )
        dlg.exec()
        self._apply_settings()

    def _apply_settings(self) -> None:
        s = self._settings
        self._sound_manager.set_volume(s.sound_volume)
        self._sound_manager.set_enabled(s.sound_enabled)
        self._notifier.set_enabled(s.notifications_enabled)
        self._engine.alert_sound = s.completion_sound
        self.setWindowOpacity(s.background_opacity)
        self._apply_always_on_top(s.always_on_top)
        self._tray_icon.setVisible(
            s.show_in_menu_bar and QSystemTrayIcon.isSystemTrayAvailable()
        )

    def _apply_always_on_top(self, on_top: bool) -> None:
        """Apply or remove WindowStaysOnTopHint."""
        flags = self.windowFlags()
        current = bool(flags & Qt.WindowType.WindowStaysOnTopHint)
        if current == on_top:
            return
        if on_top:
            flags |= Qt.WindowType.WindowStaysOnTopHint
        else:
            flags &= ~Qt.WindowType.WindowStaysOnTopHint
        was_visible = self.isVisible()
        self.setWindowFlags(flags)
        if was_visible:
            self.show()  # setWindowFlags hides the window

    # ══════════════════════════════════════════════════════════════════
    #  WINDOW STATE
    # ══════════════════════════════════════════════════════════════════

    def _restore_geometry(self) -> None:
        s = self._settings
        if s.window_x is not None and s.window_y is not None:
            self.move(s.window_x, s.window_y)
        if s.window_width and s.window_height:
            self.resize(s.window_width, s.window_height)

    def _save_geometry(self) -> None:
        if not self.isVisible():
            return
        pos = self.pos()
        size = self.size()
        self._settings.window_x = pos.x()
        self._settings.window_y = pos.y()
        self._settings.window_width = size.width()
        self._settings.window_height = size.height()
        save_settings(self._settings)

    # ══════════════════════════════════════════════════════════════════
    #  WINDOW EVENTS
    # ══════════════════════════════════════════════════════════════════

    def closeEvent(self, event) -> None:  # type: ignore[override]
        """Hide to the menu bar instead of quitting while the tray is shown."""
        self._save_geometry()
        if self._tray_icon.isVisible():
            event.ignore()
            self.hide()
        else:
            self._host_timer.stop()
            event.accept()

    def keyPressEvent(self, event) -> None:  # type: ignore[override]
        """Space toggles (outside the input field); Escape resets."""
        key = event.key()
        if key == Qt.Key.Key_Space and not self._input.hasFocus():
            self._engine.toggle()
            event.accept()
            return
        if key == Qt.Key.Key_Escape:
            self._engine.reset()
            event.accept()
            return
        super().keyPressEvent(event)
