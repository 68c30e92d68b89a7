"""
Shared constants for vinput scripts

Instruction layout and player timing.
"""

# Instruction word layout: opcode in the low bits, operand above it
OPCODE_BITS = 4
OPERAND_BITS = 13
OPCODE_MASK = (1 << OPCODE_BITS) - 1
OPERAND_MAX = (1 << OPERAND_BITS) - 1  # 8191
INSTRUCTION_BITS = OPCODE_BITS + OPERAND_BITS

# Longest single SLEEP_SEC instruction the compiler emits
SLEEP_SEC_CHUNK = 4096

# Sleeps shorter than this (in seconds) compile to nothing
SLEEP_MIN_SECONDS = 0.001

# Delay after each non-sleep instruction (ms)
PACING_DELAY_MS = 50

# Standard deviation of the random sleep offset, relative to the duration
RANDOM_SLEEP_SPREAD = 0.125

# POINTER_WHERE operand flag: overwrite the line instead of ending it
POINTER_WHERE_NO_NEWLINE = 0b0001
