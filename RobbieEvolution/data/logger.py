"""SQLite-backed experiment metadata and per-generation statistics logging."""

from __future__ import annotations

import hashlib
import json
import platform
import sqlite3
import time
from pathlib import Path
from typing import Any, Mapping

from agents.moves import Move
from data.statistics import AgentSnapshot


class SimulationLogger:
    """Persist experiment metadata and per-generation alpha/runt stats in SQLite."""

    def __init__(self, db_path: str | Path) -> None:
        self.db_path = Path(db_path)
        self.connection = sqlite3.connect(self.db_path)
        self.connection.row_factory = sqlite3.Row
        self._ensure_schema()

    def close(self) -> None:
        self.connection.close()

    def _ensure_schema(self) -> None:
        self.connection.executescript(
            """
            CREATE TABLE IF NOT EXISTS experiment_metadata (
                experiment_id TEXT PRIMARY KEY,
                config_hash TEXT NOT NULL,
                seed INTEGER NOT NULL,
                config_json TEXT NOT NULL,
                runtime_metadata TEXT NOT NULL,
                created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
            );

            CREATE TABLE IF NOT EXISTS generation_stats (
                experiment_id TEXT NOT NULL,
                generation_index INTEGER NOT NULL,
                role TEXT NOT NULL,
                score INTEGER NOT NULL,
                pick_ups INTEGER NOT NULL,
                false_pick_ups INTEGER NOT NULL,
                bumps INTEGER NOT NULL,
                rubbish_seen INTEGER NOT NULL,
                rubbish_missed INTEGER NOT NULL,
                gene_usage TEXT NOT NULL,
                mean_score REAL NOT NULL,
                diversity REAL NOT NULL,
                PRIMARY KEY (experiment_id, generation_index, role),
                FOREIGN KEY (experiment_id)
                    REFERENCES experiment_metadata (experiment_id)
                    ON DELETE CASCADE
            );
            """
        )
        self.connection.commit()

    def start_experiment(self, config: Mapping[str, Any], seed: int, metadata: Mapping[str, Any] | None = None) -> str:
        config_json = json.dumps(dict(config), sort_keys=True)
        runtime_metadata: dict[str, Any] = {"python_version": platform.python_version(), "platform": platform.platform()}
        if metadata:
            runtime_metadata.update(dict(metadata))
        config_hash = hashlib.sha256(config_json.encode("utf-8")).hexdigest()
        deterministic_key = hashlib.sha256(f"{config_hash}:{seed}".encode("utf-8")).hexdigest()
        run_nonce = str(time.time_ns())
        experiment_id = hashlib.sha256(f"{deterministic_key}:{run_nonce}".encode("utf-8")).hexdigest()[:16]
        runtime_metadata["deterministic_key"] = deterministic_key
        metadata_json = json.dumps(runtime_metadata, sort_keys=True)

        self.connection.execute(
            """
            INSERT OR IGNORE INTO experiment_metadata (
                experiment_id, config_hash, seed, config_json, runtime_metadata
            ) VALUES (?, ?, ?, ?, ?)
            """,
            (experiment_id, config_hash, seed, config_json, metadata_json),
        )
        self.connection.commit()
        return experiment_id

    def log_generation(
        self,
        experiment_id: str,
        generation_index: int,
        snapshots: Mapping[str, AgentSnapshot],
        mean_score: float = 0.0,
        diversity: float = 0.0,
    ) -> None:
        """Store one row per role for ``generation_index``."""
        rows = [
            (
                experiment_id,
                generation_index,
                role,
                snapshot.score,
                snapshot.pick_ups,
                snapshot.false_pick_ups,
                snapshot.bumps,
                snapshot.rubbish_seen,
                snapshot.rubbish_missed,
                json.dumps({move.label: count for move, count in zip(Move, snapshot.gene_usage)}),
                float(mean_score),
                float(diversity),
            )
            for role, snapshot in snapshots.items()
        ]
        self.connection.executemany(
            """
            INSERT OR REPLACE INTO generation_stats (
                experiment_id,
                generation_index,
                role,
                score,
                pick_ups,
                false_pick_ups,
                bumps,
                rubbish_seen,
                rubbish_missed,
                gene_usage,
                mean_score,
                diversity
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            rows,
        )
        self.connection.commit()

    def fetch_stats(self, experiment_id: str, role: str) -> list[dict[str, Any]]:
        """Return ordered generation rows for one role, gene usage decoded."""
        rows = self.connection.execute(
            """
            SELECT generation_index, score, pick_ups, false_pick_ups, bumps,
                   rubbish_seen, rubbish_missed, gene_usage, mean_score, diversity
            FROM generation_stats
            WHERE experiment_id = ? AND role = ?
            ORDER BY generation_index ASC
            """,
            (experiment_id, role),
        ).fetchall()
        result: list[dict[str, Any]] = []
        for row in rows:
            payload = dict(row)
            usage = json.loads(payload["gene_usage"])
            payload["gene_usage"] = [int(usage.get(move.label, 0)) for move in Move]
            result.append(payload)
        return result

    def latest_experiment_id(self) -> str | None:
        """Return most recently created experiment id, if any."""
        row = self.connection.execute(
            """
            SELECT experiment_id
            FROM experiment_metadata
            ORDER BY created_at DESC, rowid DESC
            LIMIT 1
            """
        ).fetchone()
        return str(row[0]) if row is not None else None
