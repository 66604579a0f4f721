from wp_limit_fixer.cli import run

if __name__ == "__main__":
    run()
