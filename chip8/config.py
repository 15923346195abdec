# ---- Machine ----
MEMORY_SIZE = 4096          # 4kB = 4096B
PROGRAM_START = 0x200       # programs are loaded (and start) here
MAX_PROGRAM_SIZE = MEMORY_SIZE - PROGRAM_START  # 0xE00
NUM_REGISTERS = 16          # V0..VF
FLAG = 0xF                  # VF doubles as the carry/borrow/collision flag
STACK_DEPTH = 16
NUM_KEYS = 16

# ---- Display ----
WIDTH, HEIGHT = 64, 32

# ---- Run-time defaults ----
CPU_HZ = 600
TIMER_HZ = 60
SCALE = 10
