# run_simulation.py
"""
Plays a video clip through the posture monitor.

Usage
-----
    python run_simulation.py --video clip.mp4
    python run_simulation.py --video clip.mp4 --start-time 08:00 --date 2021-12-19 --speed 1
    python run_simulation.py --video clip.mp4 --events-dir storage/events --no-display

Each confirmed posture change is printed as one JSON line on stdout.
Keys in the window: SPACE pause/resume, Q quit.
"""

import argparse
import json
import logging
import sys
from datetime import datetime

import cv2

from posture_monitor import (
    EventLogger, MonitoringSession, MonitorSettings, VideoConfig,
)
from posture_monitor.event_logger import SAVE_DIR
from posture_monitor.pose_estimator import PoseEstimator
from posture_monitor.sim_clock import format_video_time, playback_progress

logger = logging.getLogger('run_simulation')

_COLOUR = {
    'standing': (0,   200, 0  ),   # green
    'walking' : (0,   200, 0  ),
    'sitting' : (255, 200, 0  ),   # teal
    'laying'  : (0,   165, 255),   # orange
    'falling' : (0,   0,   255),   # red
}


def _put_text(frame, text, origin, colour, scale=0.7, thickness=2):
    cv2.putText(frame, text, origin,
                cv2.FONT_HERSHEY_SIMPLEX, scale, (0, 0, 0), thickness + 2)
    cv2.putText(frame, text, origin,
                cv2.FONT_HERSHEY_SIMPLEX, scale, colour, thickness)


def _print_event(event):
    # Data URLs are too long for a terminal; the event log file keeps them.
    data = event.to_dict()
    data['snapshotUrl'] = '<jpeg>' if data['snapshotUrl'] else ''
    print(json.dumps(data, ensure_ascii=False), flush=True)


def main(args):
    config = VideoConfig(
        start_time   = args.start_time,
        date         = args.date,
        speed_factor = args.speed,
        video_url    = args.video,
        camera_name  = args.camera_name,
    )
    settings = MonitorSettings.from_env(args.dotenv)
    event_log = EventLogger(save_dir=args.events_dir)

    session = MonitoringSession(
        config,
        settings=settings,
        event_sink=event_log,
        on_config_update=lambda upd: logger.info("Status: %s", upd),
        on_notification=lambda n: logger.warning("WELLNESS: %s", n.message),
    )

    cap = cv2.VideoCapture(args.video)
    if not cap.isOpened():
        print(f"Cannot open source: {args.video}", file=sys.stderr)
        return 1

    estimator = PoseEstimator()

    fps = cap.get(cv2.CAP_PROP_FPS) or 0.0
    frames = cap.get(cv2.CAP_PROP_FRAME_COUNT) or 0.0
    duration = frames / fps if fps > 0 else 0.0
    session.set_video_duration(duration)

    window = 'Posture monitor - SPACE pause, Q quit'
    try:
        while True:
            if session.is_playing:
                ret, frame = cap.read()
                if not ret:
                    break
                t = cap.get(cv2.CAP_PROP_POS_MSEC) / 1000.0
                landmarks = estimator.process_frame(frame)
                result = session.process_tick(landmarks, t, frame)
                if result.event is not None:
                    _print_event(result.event)

            if args.no_display:
                continue

            shown = frame.copy()
            estimator.draw(shown)
            posture = session.confirmed_posture.value
            _put_text(shown, f'{posture.upper()}', (20, 40),
                      _COLOUR.get(posture, (255, 255, 255)), scale=0.9)
            _put_text(shown,
                      f'{session.clock.date(t)} {session.clock.timestamp(t)}  '
                      f"[{format_video_time(t)} / {format_video_time(duration)}  "
                      f"{playback_progress(t, duration):.0f}%]",
                      (20, 75), (255, 255, 255), scale=0.6)
            notice = session.active_notification()
            if notice is not None:
                _put_text(shown, notice.message, (20, 110), (0, 220, 220), scale=0.55)
            if not session.is_playing:
                _put_text(shown, 'PAUSED', (20, 145), (180, 180, 180))
            cv2.imshow(window, shown)

            key = cv2.waitKey(1) & 0xFF
            if key == ord('q'):
                break
            if key == ord(' '):
                if session.is_playing:
                    session.pause()
                else:
                    session.resume()
    finally:
        session.end()
        estimator.close()
        cap.release()
        if not args.no_display:
            cv2.destroyAllWindows()

    logger.info("Done. %d event(s), %d critical.",
                len(event_log), len(event_log.critical_events()))
    if event_log.filepath is not None:
        logger.info("Events written to %s", event_log.filepath)
    return 0


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description='Posture monitoring simulation over a video clip')
    parser.add_argument('--video', required=True, help='Path to a video file')
    parser.add_argument('--start-time', default=datetime.now().strftime('%H:%M'),
                        help='Simulated clock at video start, HH:MM (default: now)')
    parser.add_argument('--date', default=datetime.now().strftime('%Y-%m-%d'),
                        help='Simulated date at video start, YYYY-MM-DD (default: today)')
    parser.add_argument('--speed', type=float, default=1.0,
                        help='Simulated minutes per video second (>= 1)')
    parser.add_argument('--camera-name', default='Demo camera')
    parser.add_argument('--events-dir', nargs='?', const=str(SAVE_DIR), default=None,
                        help=f'Also append events as JSON lines (default dir: {SAVE_DIR})')
    parser.add_argument('--dotenv', default=None, help='Explicit .env path for POSTURE_* settings')
    parser.add_argument('--no-display', action='store_true')
    parser.add_argument('-v', '--verbose', action='store_true')
    return parser.parse_args(argv)


if __name__ == '__main__':
    args = parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    try:
        sys.exit(main(args))
    except ValueError as exc:
        # bad --start-time / --date / --speed, or POSTURE_* values
        print(f"Cannot start simulation: {exc}", file=sys.stderr)
        sys.exit(2)
