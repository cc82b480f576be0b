"""
SolfaSign - Curwen Solfege Hand Sign Recognition

Entry point for the application.
"""
import argparse
import logging
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent / "src"))


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="SolfaSign - Solfege Hand Sign Recognition",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to config file (default: config.yaml)",
    )

    parser.add_argument(
        "--classifier",
        choices=["heuristic", "trained"],
        default=None,
        help="Confidence scorer (overrides config)",
    )

    parser.add_argument(
        "--model",
        type=Path,
        default=None,
        help="Weights (.npz) for the trained classifier; implies --classifier trained",
    )

    parser.add_argument(
        "--hold-delay",
        type=float,
        default=None,
        help="Milliseconds a sign must be held before it triggers (overrides config)",
    )

    parser.add_argument(
        "--mute",
        action="store_true",
        help="Do not play notes",
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug mode with landmark and confidence overlay",
    )

    return parser.parse_args()


def build_player(config):
    """Note player for the configured synth, or None when audio is off."""
    from audio import ConsoleSynth, NotePlayer

    if not config.audio.enabled:
        return None
    if config.audio.synth != "console":
        print(f"WARNING: Unknown synth '{config.audio.synth}', using console")
    return NotePlayer(ConsoleSynth())


def run_webcam_debug(config):
    """
    Run webcam in debug mode - shows camera feed with landmarks and
    per-sign confidences in an OpenCV window.
    """
    import cv2
    from solfege import GesturePipeline, ModelError
    from webcam import HandTracker, draw_overlay

    tracker = HandTracker(config)
    player = build_player(config)
    try:
        pipeline = GesturePipeline(config.recognition, listeners=[player] if player else [])
    except ModelError as e:
        print(f"ERROR: {e}")
        return 1

    def report(event):
        print(f"[{tracker.frame_count:5d}] {event}")

    pipeline.subscribe(report)

    print("Starting webcam debug mode...")
    print("Press 'q' to quit")
    print("-" * 40)

    if not tracker.start():
        print("ERROR: Could not open camera")
        return 1

    try:
        while True:
            landmarks = tracker.get_landmarks()
            pipeline.on_frame(landmarks)

            image = tracker.last_frame
            if image is not None:
                frame = draw_overlay(
                    image, landmarks, pipeline.confidences, pipeline.active_gesture
                )
                cv2.putText(
                    frame, f"State: {pipeline.state}", (10, frame.shape[0] - 15),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.6, (255, 255, 255), 1
                )
                cv2.imshow("SolfaSign Debug", frame)

            if cv2.waitKey(1) & 0xFF == ord('q'):
                break

    finally:
        if player:
            player.stop()
        tracker.stop()
        cv2.destroyAllWindows()

    return 0


def run_webcam_mode(config):
    """Run SolfaSign with the recognition pipeline on a worker thread."""
    import signal
    import atexit
    from PyQt5.QtWidgets import QApplication, QLabel
    from PyQt5.QtGui import QImage, QPixmap
    from PyQt5.QtCore import QThread, Qt
    from webcam import RecognitionWorker

    app = QApplication(sys.argv)

    preview = QLabel("Waiting for camera...")
    preview.setWindowTitle("SolfaSign")
    preview.setAlignment(Qt.AlignCenter)
    preview.resize(config.camera.width // 2, config.camera.height // 2)
    if config.ui.show_preview:
        preview.show()

    player = build_player(config)

    # Setup background worker and thread
    thread = QThread()
    worker = RecognitionWorker(config)
    worker.moveToThread(thread)

    def cleanup():
        """Ensure camera is released on exit."""
        print("\nCleaning up camera resources...")
        worker.stop_process()
        thread.quit()
        thread.wait(2000)
        if player:
            player.stop()
        print("Cleanup complete.")

    atexit.register(cleanup)

    def signal_handler(signum, frame):
        """Handle Ctrl+C and kill signals gracefully."""
        print(f"\nReceived signal {signum}, shutting down...")
        app.quit()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    def handle_event(event):
        """Gesture events from the worker, delivered in order on the GUI thread."""
        print(f"Sign: {event}")
        if player:
            player(event)

    def show_frame(image):
        h, w = image.shape[:2]
        rgb = image[:, :, ::-1].copy()
        qimage = QImage(rgb.data, w, h, 3 * w, QImage.Format_RGB888)
        preview.setPixmap(QPixmap.fromImage(qimage).scaled(
            preview.width(), preview.height(), Qt.KeepAspectRatio
        ))

    # Connect signals (QueuedConnection keeps handlers on the GUI thread, in emit order)
    thread.started.connect(worker.start_process)
    worker.gesture_event.connect(handle_event, Qt.QueuedConnection)
    worker.frame_ready.connect(show_frame, Qt.QueuedConnection)
    worker.error.connect(lambda msg: print(f"WORKER ERROR: {msg}"), Qt.QueuedConnection)

    thread.start()

    try:
        result = app.exec_()
    finally:
        cleanup()
        atexit.unregister(cleanup)  # Avoid double cleanup

    return result


def main():
    """Main entry point."""
    args = parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    from solfege import ConfigError, load_config, with_overrides

    try:
        config = load_config(args.config)

        # Apply CLI overrides (--model alone selects the trained classifier)
        config.recognition = with_overrides(
            config.recognition,
            classifier=args.classifier,
            model_path=args.model,
            hold_delay_ms=args.hold_delay,
        )
        rec = config.recognition
        if args.mute:
            config.audio.enabled = False
        if args.debug:
            config.ui.debug_overlay = True
    except ConfigError as e:
        print(f"ERROR: {e}")
        return 2

    print("SolfaSign starting...")
    print(f"  Classifier: {rec.classifier}")
    print(f"  Hold delay: {rec.hold_delay_ms:.0f} ms")
    print(f"  Audio: {'on' if config.audio.enabled else 'off'}")
    print(f"  Debug: {args.debug}")
    print()

    if args.debug:
        return run_webcam_debug(config)
    return run_webcam_mode(config)


if __name__ == "__main__":
    sys.exit(main())
