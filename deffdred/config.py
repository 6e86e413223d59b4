"""
Game configuration for DeffDred
Arena, entity stats, spawn schedule and upgrade tuning
"""

# Arena
GRID_COLS = 60
GRID_ROWS = 20
FRAME_MS = 60  # one tick

# ==============================================================================
# PLAYER
# ==============================================================================

PLAYER_CONFIG = {
    "hp": 10,
    "max_hp": 10,
    "max_currency": 100,
    "fire_cooldown_ms": 500,
    "bullet_speed": -1,       # negative = upward
    "damage": 10,
    "move_speed": 1,
    "bullet_streams": 1,
    "life_steal_percent": 0,
    "shape": (" A ", "/V\\"),
    # Reference build leaves enemy bullets in flight after they hit the player
    "enemy_shots_pierce": True,
}

# ==============================================================================
# ENEMIES
# ==============================================================================

ENEMY_CONFIGS = {
    "basic": {
        "hp": 10,
        "fire_cooldown": 60,
        "shape": ("#",),
    },
    "hazard": {
        "hp": 20,
        "fire_cooldown": 60,
        "shape": ("@",),
    },
    "boss": {
        "hp": 150,
        "fire_cooldown": 60,
        "shape": ("<#>", " V"),
    },
}

WANDER_CONFIG = {
    "burst_steps": 5,
    "pause_ticks": 16,
    "ticks_per_step": 3,
}

HAZARD_CONFIG = {
    "cooldown_ms": 4000,
    "flash_ms": 1000,
    "fire_ms": 1500,
    "contact_damage": 2,      # once per firing cycle
    "beam_half_width": 1,     # 3-wide cross
    "kill_column_range": 3,   # rows of reach when column-aligned
    "kill_row_range": 8,      # columns of reach when row-aligned
}

BULLET_DAMAGE = {
    "enemy_shot": 1,
    "boss_orb": 3,
}

# ==============================================================================
# SPAWNING & SCORING
# ==============================================================================

SPAWN_CONFIG = {
    "basic_interval": 83,
    "hazard_interval": 100,
    "basic_max_row": 2,
    "scaling_start_frame": 1500,
    "scaling_step_frames": 100,
    "scaling_factor": 0.925,
    "boss_first_frame": 2250,
    "boss_every_frames": 500,
    "boss_position": (GRID_COLS // 2 - 1, 1),
}

REWARD_CONFIG = {
    "kill_currency": 10,
    "kill_score": 50,
    "survival_score": 50,
    "survival_every_frames": 50,
}

# ==============================================================================
# UPGRADES
# ==============================================================================

UPGRADE_CONFIG = {
    "offer_size": 3,
    "max_hp_bonus": 5,
    "attack_speed_factor": 0.8,
    "bullet_speed_bonus": 1,
    "damage_bonus": 5,
    "move_speed_bonus": 1,
    "max_bullet_streams": 8,
    "life_steal_bonus": 5,
    "max_life_steal": 95,   # stays below 100%
}

# ==============================================================================
# RESOURCES
# ==============================================================================

PATTERN_PATH = "pattern.txt"
PATTERN_COMMENT = "#"

LEADERBOARD_CONFIG = {
    "path": "highscores.txt",
    "top_n": 10,
    "max_name_length": 24,
    "default_name": "Player",
}
