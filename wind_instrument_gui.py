import logging
import os
import sys
import threading
import traceback

import keyboard  # global hotkey
from PyQt5 import QtCore, QtWidgets

from windsong_tools.config import BlackKeyMode, ConvertConfig, RangeMode
from windsong_tools.io_midicsv import load_tracks
from windsong_tools.pipeline import convert_tracks
from windsong_tools.player import play_script
from windsong_tools.script import write_script


# ==========================
#  CONFIG
# ==========================

STOP_HOTKEY = "Pause"
COUNTDOWN_SECONDS = 3

RANGE_CHOICES = [
    ("Fold by octaves", RangeMode.FOLD),
    ("Clamp to edge key", RangeMode.CLAMP),
    ("Skip note", RangeMode.SKIP),
]

BLACK_KEY_CHOICES = [
    ("Contextual (mute low, round up)", BlackKeyMode.CONTEXTUAL),
    ("Mute", BlackKeyMode.MUTE),
    ("Round down", BlackKeyMode.ROUND_DOWN),
    ("Round up", BlackKeyMode.ROUND_UP),
    ("Keep (unplayable keys dropped)", BlackKeyMode.IDENTITY),
]


def build_script_from_midi(midi_path: str, config: ConvertConfig):
    decoded = load_tracks(midi_path)
    return convert_tracks(decoded, config)


def _combo(choices):
    box = QtWidgets.QComboBox()
    for label, mode in choices:
        box.addItem(label, mode)
    return box


# ==========================
#  Main Window
# ==========================

class MainWindow(QtWidgets.QWidget):
    def __init__(self):
        super().__init__()

        self.setWindowTitle("Windsong Player")
        self.setMinimumSize(520, 300)

        # State
        self.current_midi_path = None
        self.current_records = None
        self.load_generation = 0
        self.play_thread = None
        self.stop_event = threading.Event()

        layout = QtWidgets.QVBoxLayout(self)
        layout.setContentsMargins(12, 8, 12, 10)
        layout.setSpacing(8)

        # === OPTIONS ===
        form = QtWidgets.QFormLayout()

        self.transpose_spin = QtWidgets.QSpinBox()
        self.transpose_spin.setRange(-4, 4)
        self.transpose_spin.setSuffix(" oct")
        form.addRow("Transpose", self.transpose_spin)

        self.below_combo = _combo(RANGE_CHOICES)
        form.addRow("Below range", self.below_combo)

        self.above_combo = _combo(RANGE_CHOICES)
        form.addRow("Above range", self.above_combo)

        self.black_combo = _combo(BLACK_KEY_CHOICES)
        form.addRow("Black keys", self.black_combo)

        for widget in (self.below_combo, self.above_combo, self.black_combo):
            widget.currentIndexChanged.connect(self.on_options_changed)
        self.transpose_spin.valueChanged.connect(self.on_options_changed)

        # === STATUS AREA ===
        self.file_label = QtWidgets.QLabel("No MIDI loaded.")
        self.file_label.setWordWrap(True)
        self.status_label = QtWidgets.QLabel("Ready.")

        # === BUTTONS ===
        self.open_button = QtWidgets.QPushButton("Open MIDI…")
        self.open_button.clicked.connect(self.on_open_clicked)

        self.save_button = QtWidgets.QPushButton("Save Script…")
        self.save_button.setEnabled(False)
        self.save_button.clicked.connect(self.on_save_clicked)

        self.play_button = QtWidgets.QPushButton("Play")
        self.play_button.setEnabled(False)
        self.play_button.clicked.connect(self.on_play_clicked)

        self.stop_button = QtWidgets.QPushButton("Stop")
        self.stop_button.setEnabled(False)
        self.stop_button.clicked.connect(self.on_stop_clicked)

        button_row = QtWidgets.QHBoxLayout()
        button_row.addWidget(self.open_button)
        button_row.addWidget(self.save_button)
        button_row.addStretch()
        button_row.addWidget(self.play_button)
        button_row.addWidget(self.stop_button)

        layout.addLayout(form)
        layout.addWidget(self.file_label)
        layout.addWidget(self.status_label)
        layout.addLayout(button_row)

        # === GLOBAL PANIC HOTKEY ===
        keyboard.add_hotkey(STOP_HOTKEY, self._on_global_hotkey)

    def current_config(self) -> ConvertConfig:
        return ConvertConfig(
            transpose=self.transpose_spin.value(),
            below_range_mode=self.below_combo.currentData(),
            above_range_mode=self.above_combo.currentData(),
            black_key_mode=self.black_combo.currentData(),
        )

    # ==========================
    #  Load + Convert
    # ==========================

    def on_open_clicked(self):
        path, _ = QtWidgets.QFileDialog.getOpenFileName(
            self,
            "Select MIDI file",
            "",
            "MIDI Files (*.mid *.midi);;midicsv Files (*.csv)",
        )
        if path:
            self.load_midi(path)

    def on_options_changed(self, *_):
        if self.current_midi_path:
            self.load_midi(self.current_midi_path)

    def load_midi(self, path):
        self.stop_playback()

        self.load_generation += 1
        generation = self.load_generation
        self.current_midi_path = path
        self.current_records = None
        self.file_label.setText(f"Loaded: {path}")
        self.status_label.setText("Converting MIDI…")
        self.play_button.setEnabled(False)
        self.save_button.setEnabled(False)

        config = self.current_config()

        def worker():
            try:
                records = build_script_from_midi(path, config)
            except Exception as e:
                traceback.print_exc()
                QtCore.QMetaObject.invokeMethod(
                    self,
                    "_load_failed",
                    QtCore.Qt.QueuedConnection,
                    QtCore.Q_ARG(int, generation),
                    QtCore.Q_ARG(str, str(e)),
                )
                return

            QtCore.QMetaObject.invokeMethod(
                self,
                "_load_success",
                QtCore.Qt.QueuedConnection,
                QtCore.Q_ARG(int, generation),
                QtCore.Q_ARG(object, records),
            )

        threading.Thread(target=worker, daemon=True).start()

    # Every load_midi call bumps load_generation; results from older runs
    # (another file, or options changed since) are dropped.
    @QtCore.pyqtSlot(int, object)
    def _load_success(self, generation, records):
        if generation != self.load_generation:
            return
        self.current_records = records
        keys = sum(len(r.keys) for r in records)
        self.play_button.setEnabled(keys > 0)
        self.save_button.setEnabled(bool(records))
        if keys:
            self.status_label.setText(f"Ready. {len(records)} chords, {keys} keys.")
        else:
            self.status_label.setText("This MIDI has no playable notes with these options.")

    @QtCore.pyqtSlot(int, str)
    def _load_failed(self, generation, msg):
        if generation != self.load_generation:
            return
        self.status_label.setText("Error loading MIDI.")
        QtWidgets.QMessageBox.critical(self, "Error", msg)

    def on_save_clicked(self):
        if not self.current_records:
            return

        base = os.path.splitext(self.current_midi_path)[0]
        path, _ = QtWidgets.QFileDialog.getSaveFileName(
            self,
            "Save Script",
            base + "_play.txt",
            "Play scripts (*.txt)",
        )
        if not path:
            return

        try:
            write_script(self.current_records, path)
        except OSError as e:
            QtWidgets.QMessageBox.critical(
                self,
                "Error Saving Script",
                f"Could not save script:\n\n{e}",
            )
            return

        self.status_label.setText(f"Script saved to: {path}")

    # ==========================
    #  Playback
    # ==========================

    def on_play_clicked(self):
        if not self.current_records:
            return
        if self.play_thread and self.play_thread.is_alive():
            return

        self.status_label.setText(
            f"Starting in {COUNTDOWN_SECONDS}s, switch to the game… ({STOP_HOTKEY} to stop)"
        )
        self.stop_event.clear()
        self.stop_button.setEnabled(True)
        self.play_button.setEnabled(False)

        records = self.current_records

        def worker():
            if not self.stop_event.wait(COUNTDOWN_SECONDS):
                play_script(records, stop_event=self.stop_event)
            QtCore.QMetaObject.invokeMethod(
                self, "_playback_done", QtCore.Qt.QueuedConnection
            )

        self.play_thread = threading.Thread(target=worker, daemon=True)
        self.play_thread.start()

    @QtCore.pyqtSlot()
    def _playback_done(self):
        self.stop_button.setEnabled(False)
        self.play_button.setEnabled(bool(self.current_records))
        if not self.stop_event.is_set():
            self.status_label.setText("Ready.")

    def on_stop_clicked(self):
        self.stop_playback()
        self.status_label.setText("Stopped.")

    def stop_playback(self):
        if self.play_thread and self.play_thread.is_alive():
            self.stop_event.set()
            self.play_thread.join(timeout=1.0)

        self.stop_button.setEnabled(False)
        if self.current_records:
            self.play_button.setEnabled(True)

    def _on_global_hotkey(self):
        QtCore.QMetaObject.invokeMethod(
            self, "_global_stop", QtCore.Qt.QueuedConnection
        )

    @QtCore.pyqtSlot()
    def _global_stop(self):
        if self.play_thread and self.play_thread.is_alive():
            self.stop_playback()
            self.status_label.setText(f"Stopped via {STOP_HOTKEY}.")

    def closeEvent(self, event):
        self.stop_playback()
        event.accept()


def main():
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    app = QtWidgets.QApplication(sys.argv)
    w = MainWindow()
    w.show()
    sys.exit(app.exec_())


if __name__ == "__main__":
    main()
