"""
Synthetic Data Generator for Behavioral Capture Sessions

Simulates capture windows for a set of users, each with a touch profile:
1. calm      - Light pressure, slow swipes, little device motion
2. default   - Average interaction
3. energetic - Firm taps, fast swipes, lots of device motion

Every session is reduced to its feature vector, pattern hash and confidence
score. Useful for eyeballing how stable fingerprints are across sessions of
the same user, and how often unrelated users collide under the
position-wise hash similarity.
"""

import argparse
import json
from pathlib import Path

import numpy as np
import pandas as pd

from hashgait.services.confidence_scorer import confidence_scorer
from hashgait.services.feature_extractor import FEATURE_NAMES, feature_extractor
from hashgait.services.pattern_hasher import pattern_hasher
from hashgait.services.sensor_simulator import PROFILES, simulate_capture
from hashgait.services.similarity_matcher import calculate_similarity


def generate_sessions(
    users_per_profile: int = 5,
    sessions_per_user: int = 10,
    window_seconds: float = 10.0,
    seed: int = 42,
) -> pd.DataFrame:
    """One row per simulated capture session."""
    records = []
    rng = np.random.default_rng(seed)

    for profile_name, profile in PROFILES.items():
        for u in range(users_per_profile):
            user_id = f"{profile_name}_{u:03d}"
            for s in range(sessions_per_user):
                snapshot = simulate_capture(
                    seed=int(rng.integers(0, 2**31 - 1)),
                    profile=profile,
                    window_seconds=window_seconds,
                )
                features = feature_extractor.extract_features(
                    snapshot.touch_events,
                    snapshot.accelerometer_data,
                    snapshot.gyroscope_data,
                )

                record = {
                    "user_id": user_id,
                    "profile": profile_name,
                    "session": s,
                    "touch_events": len(snapshot.touch_events),
                    "accelerometer_samples": len(snapshot.accelerometer_data),
                    "gyroscope_samples": len(snapshot.gyroscope_data),
                }
                for name in FEATURE_NAMES:
                    record[name] = getattr(features, name)
                record["pattern_hash"] = pattern_hasher.generate_pattern_hash(features)
                record["confidence_score"] = confidence_scorer.calculate_confidence_score(features)

                records.append(record)

    return pd.DataFrame(records)


def match_summary(df: pd.DataFrame, threshold: int = 70) -> dict:
    """
    Compare each session's hash to the other sessions.

    Returns the share of same-user and cross-user pairs that would pass
    the match threshold.
    """
    hashes = df["pattern_hash"].tolist()
    users = df["user_id"].tolist()

    same, same_pass, cross, cross_pass = 0, 0, 0, 0
    for i in range(len(hashes)):
        for j in range(i + 1, len(hashes)):
            passed = calculate_similarity(hashes[i], hashes[j]) >= threshold
            if users[i] == users[j]:
                same += 1
                same_pass += passed
            else:
                cross += 1
                cross_pass += passed

    return {
        "same_user_pairs": same,
        "same_user_accept_rate": same_pass / same if same else 0.0,
        "cross_user_pairs": cross,
        "cross_user_accept_rate": cross_pass / cross if cross else 0.0,
        "threshold": threshold,
    }


def save_dataset(df: pd.DataFrame, output_dir: Path, summary: dict) -> tuple[Path, Path]:
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    csv_path = output_dir / "synthetic_sessions.csv"
    df.to_csv(csv_path, index=False)

    meta = {
        "profiles": list(PROFILES),
        "features": FEATURE_NAMES,
        "total_sessions": len(df),
        "users": int(df["user_id"].nunique()),
        "match_summary": summary,
    }
    meta_path = output_dir / "dataset_metadata.json"
    with open(meta_path, "w") as f:
        json.dump(meta, f, indent=2)

    return csv_path, meta_path


def main():
    parser = argparse.ArgumentParser(description="Generate synthetic capture sessions")
    parser.add_argument("--output-dir", type=Path, default=Path("data"),
                        help="Output directory for generated data")
    parser.add_argument("--seed", type=int, default=42,
                        help="Random seed for reproducibility")
    parser.add_argument("--users", type=int, default=5,
                        help="Users per touch profile")
    parser.add_argument("--sessions", type=int, default=10,
                        help="Capture sessions per user")
    parser.add_argument("--window", type=float, default=10.0,
                        help="Capture window in seconds")
    args = parser.parse_args()

    print("=" * 50)
    print("HashGait Synthetic Session Generator")
    print("=" * 50)

    df = generate_sessions(
        users_per_profile=args.users,
        sessions_per_user=args.sessions,
        window_seconds=args.window,
        seed=args.seed,
    )
    summary = match_summary(df)
    csv_path, meta_path = save_dataset(df, args.output_dir, summary)

    print(f"\nSessions generated: {len(df)}")
    print(f"Saved to: {csv_path}")
    print(f"Metadata saved to: {meta_path}")
    print("\nConfidence by profile:")
    print(df.groupby("profile")["confidence_score"].describe()[["mean", "min", "max"]])
    print(f"\nSame-user accept rate:  {summary['same_user_accept_rate']:.1%}")
    print(f"Cross-user accept rate: {summary['cross_user_accept_rate']:.1%}")


if __name__ == "__main__":
    main()
