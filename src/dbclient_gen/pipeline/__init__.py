from .run import GenerationRun, RunState, generate_binaries, generate_client, run, write_ignore_file

__all__ = [
    "GenerationRun",
    "RunState",
    "generate_binaries",
    "generate_client",
    "run",
    "write_ignore_file",
]
