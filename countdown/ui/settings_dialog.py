"""Settings dialog for CountDown.

A modal dialog for the completion sound, notifications and window
behaviour.  Changes are saved to disk immediately; the caller re-applies
them once the dialog closes.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import (
    QDialog, QVBoxLayout, QHBoxLayout, QFormLayout,
    QLabel, QSlider, QCheckBox, QComboBox, QPushButton,
    QFrame, QWidget,
)

from ..settings import Settings, save_settings


class SettingsDialog(QDialog):
    """Modal dialog for all user preferences."""

    def __init__(
        self,
        settings: Settings,
        parent: QWidget | None = None,
        *,
        sound_names: Sequence[str] = (),
        sound_preview_callback: Callable[[str], None] | None = None,
    ) -> None:
        super().__init__(parent)
        self.setWindowTitle("Settings")
        self.setMinimumWidth(380)
        self.setModal(True)

        self._settings = settings
        self._sound_names = list(sound_names) or [settings.completion_sound]
        self._sound_preview = sound_preview_callback

        self._build_ui()
        self._populate()
        self._connect()

    # ══════════════════════════════════════════════════════════════════
    #  BUILD UI
    # ══════════════════════════════════════════════════════════════════

    def _build_ui(self) -> None:
        root = QVBoxLayout(self)
        root.setContentsMargins(24, 20, 24, 20)
        root.setSpacing(16)

        # ── Window section ───────────────────────────────────────────
        root.addWidget(self._section_label("Window"))
        win_form = QFormLayout()
        win_form.setContentsMargins(0, 0, 0, 0)
        win_form.setHorizontalSpacing(20)
        win_form.setVerticalSpacing(10)

        opacity_row = QHBoxLayout()
        opacity_row.setSpacing(10)
        self._opacity_slider = QSlider(Qt.Orientation.Horizontal)
        self._opacity_slider.setRange(20, 100)
        self._opacity_label = QLabel("90%")
        self._opacity_label.setMinimumWidth(36)
        opacity_row.addWidget(self._opacity_slider)
        opacity_row.addWidget(self._opacity_label)
        opacity_wrapper = QWidget()
        opacity_wrapper.setLayout(opacity_row)
        win_form.addRow("Background opacity:", opacity_wrapper)

        self._on_top_cb = QCheckBox("Keep window always on top")
        win_form.addRow("", self._on_top_cb)

        self._menu_bar_cb = QCheckBox("Show countdown in menu bar")
        win_form.addRow("", self._menu_bar_cb)

        root.addLayout(win_form)
        root.addWidget(self._separator())

        # ── Sound & Notifications section ────────────────────────────
        root.addWidget(self._section_label("Sound & Notifications"))
        snd_form = QFormLayout()
        snd_form.setContentsMargins(0, 0, 0, 0)
        snd_form.setHorizontalSpacing(20)
        snd_form.setVerticalSpacing(10)

        self._sound_combo = QComboBox()
        self._sound_combo.addItems(self._sound_names)
        snd_form.addRow("Completion sound:", self._sound_combo)

        self._sound_cb = QCheckBox("Play sound when done")
        snd_form.addRow("", self._sound_cb)

        vol_row = QHBoxLayout()
        vol_row.setSpacing(10)
        self._vol_slider = QSlider(Qt.Orientation.Horizontal)
        self._vol_slider.setRange(0, 100)
        self._vol_slider.setTickInterval(10)
        self._vol_label = QLabel("70%")
        self._vol_label.setMinimumWidth(36)
        vol_row.addWidget(self._vol_slider)
        vol_row.addWidget(self._vol_label)
        vol_wrapper = QWidget()
        vol_wrapper.setLayout(vol_row)
        snd_form.addRow("Volume:", vol_wrapper)

        self._notif_cb = QCheckBox("Desktop notifications")
        snd_form.addRow("", self._notif_cb)

        root.addLayout(snd_form)

        # ── close button ─────────────────────────────────────────────
        root.addStretch()
        btn_row = QHBoxLayout()
        btn_row.addStretch()
        close_btn = QPushButton("Done")
        close_btn.clicked.connect(self.accept)
        btn_row.addWidget(close_btn)
        root.addLayout(btn_row)

    # ── helpers ──────────────────────────────────────────────────────

    @staticmethod
    def _section_label(text: str) -> QLabel:
        lbl = QLabel(text)
        lbl.setStyleSheet("font-size: 15px; font-weight: 700; margin-top: 4px;")
        return lbl

    @staticmethod
    def _separator() -> QFrame:
        line = QFrame()
        line.setFrameShape(QFrame.Shape.HLine)
        line.setFixedHeight(1)
        return line

    # ══════════════════════════════════════════════════════════════════
    #  POPULATE FROM SETTINGS
    # ══════════════════════════════════════════════════════════════════

    def _populate(self) -> None:
        s = self._settings
        opacity = round(s.background_opacity * 100)
        self._opacity_slider.setValue(opacity)
        self._opacity_label.setText(f"{opacity}%")
        self._on_top_cb.setChecked(s.always_on_top)
        self._menu_bar_cb.setChecked(s.show_in_menu_bar)
        index = self._sound_combo.findText(s.completion_sound)
        self._sound_combo.setCurrentIndex(max(index, 0))
        self._sound_cb.setChecked(s.sound_enabled)
        self._vol_slider.setValue(s.sound_volume)
        self._vol_label.setText(f"{s.sound_volume}%")
        self._notif_cb.setChecked(s.notifications_enabled)

    def _connect(self) -> None:
        # Connected after _populate so filling the widgets doesn't save
        self._opacity_slider.valueChanged.connect(self._on_opacity_changed)
        self._on_top_cb.toggled.connect(self._on_toggle_changed)
        self._menu_bar_cb.toggled.connect(self._on_toggle_changed)
        self._sound_combo.currentTextChanged.connect(self._on_sound_changed)
        self._sound_cb.toggled.connect(self._on_toggle_changed)
        self._vol_slider.valueChanged.connect(self._on_volume_changed)
        self._vol_slider.sliderReleased.connect(self._on_volume_released)
        self._notif_cb.toggled.connect(self._on_toggle_changed)

    # ══════════════════════════════════════════════════════════════════
    #  CHANGE HANDLERS: save immediately
    # ══════════════════════════════════════════════════════════════════

    def _on_toggle_changed(self) -> None:
        self._settings.always_on_top = self._on_top_cb.isChecked()
        self._settings.show_in_menu_bar = self._menu_bar_cb.isChecked()
        self._settings.sound_enabled = self._sound_cb.isChecked()
        self._settings.notifications_enabled = self._notif_cb.isChecked()
        self._save()

    def _on_opacity_changed(self, value: int) -> None:
        self._opacity_label.setText(f"{value}%")
        self._settings.background_opacity = value / 100.0
        self._save()

    def _on_sound_changed(self, name: str) -> None:
        self._settings.completion_sound = name
        self._save()
        if self._sound_preview:
            self._sound_preview(name)

    def _on_volume_changed(self, value: int) -> None:
        self._vol_label.setText(f"{value}%")
        self._settings.sound_volume = value
        self._save()

    def _on_volume_released(self) -> None:
        """Preview the selected sound at the new volume."""
        if self._sound_preview:
            self._sound_preview(self._settings.completion_sound)

    def _save(self) -> None:
        save_settings(self._settings)

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC
    # ══════════════════════════════════════════════════════════════════

    @property
    def settings(self) -> Settings:
        return self._settings
