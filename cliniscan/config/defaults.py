DEFAULT_CONFIG = {
    # -----------------------------
    # ENGINE (size gate, previews)
    # -----------------------------
    "engine": {
        "max_file_size": "50MB",
        "validation_level": "strict",
        "preview_limit": 50,
    },

    # -----------------------------
    # AUDIT OBSERVERS (OPTIONAL)
    # -----------------------------
    # e.g. [{"type": "file", "path": "analysis_audit.jsonl"}]
    "observers": [],

    # -----------------------------
    # AUTOMATION
    # -----------------------------
    "automation": {
        "cooldown_seconds": 10,
        "settle_seconds": 2,
    },

    # -----------------------------
    # OUTPUT CONTROL
    # -----------------------------
    "output_dir": "runs",

    "metadata": {
        "framework": "CliniScan",
    },
}
