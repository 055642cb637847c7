from hooktrace.boot import run_web

from main_terminal import Boot


if __name__ == "__main__":
    run_web(Boot, port=8000)
