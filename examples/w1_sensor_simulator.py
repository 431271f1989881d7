#!/usr/bin/env python3
"""
1-Wire Sensor Simulator
=======================

Writes fake DS18B20 w1_slave files so the temperature overlay can be tried
without sensor hardware. The temperature drifts slowly around a base value.

Usage:
    python w1_sensor_simulator.py --root /tmp/w1 28-0316a2795fff 28-0000075a1b2c

    # In another terminal
    omnipane 0 --overlay:temperature=28-0316a2795fff --sensor-root /tmp/w1
"""

import argparse
import math
import time
from pathlib import Path

CRC_LINE = "72 01 4b 46 7f ff 0e 10 57 : crc=57 YES\n"
DATA_LINE = "72 01 4b 46 7f ff 0e 10 57 t={millidegrees}\n"


class SensorSimulator:
    """Writes one w1_slave file per sensor on every tick"""

    def __init__(self, root, sensor_ids, base_temperature=21.0, amplitude=2.0, period=120.0):
        self.root = Path(root)
        self.sensor_ids = sensor_ids
        self.base_temperature = base_temperature
        self.amplitude = amplitude
        self.period = period
        self.started_at = time.monotonic()

    def temperature(self, index):
        """Sine drift, each sensor shifted a bit"""
        elapsed = time.monotonic() - self.started_at
        phase = 2 * math.pi * elapsed / self.period + index
        return self.base_temperature + index * 0.5 + self.amplitude * math.sin(phase)

    def write_all(self):
        for index, sensor_id in enumerate(self.sensor_ids):
            path = self.root / sensor_id / "w1_slave"
            path.parent.mkdir(parents=True, exist_ok=True)

            celsius = self.temperature(index)
            content = CRC_LINE + DATA_LINE.format(millidegrees=int(round(celsius * 1000)))

            # Replace atomically so the viewer never reads half a file
            tmp_path = path.with_suffix(".tmp")
            tmp_path.write_text(content)
            tmp_path.replace(path)

            print(f"🌡️  {sensor_id}: {celsius:.3f} °C -> {path}")

    def run(self, interval):
        print(f"Writing {len(self.sensor_ids)} sensor(s) under {self.root} every {interval}s (Ctrl+C to stop)")
        try:
            while True:
                self.write_all()
                time.sleep(interval)
        except KeyboardInterrupt:
            print("\nStopped")


def main():
    parser = argparse.ArgumentParser(description="Fake 1-Wire temperature sensors")
    parser.add_argument("sensor_ids", nargs="+", help="Sensor IDs, e.g. 28-0316a2795fff")
    parser.add_argument("--root", default="/tmp/w1", help="Directory to write <id>/w1_slave under")
    parser.add_argument("--interval", type=float, default=2.0, help="Seconds between writes")
    parser.add_argument("--base", type=float, default=21.0, help="Base temperature in °C")
    args = parser.parse_args()

    simulator = SensorSimulator(args.root, args.sensor_ids, base_temperature=args.base)
    simulator.run(args.interval)


if __name__ == "__main__":
    main()
