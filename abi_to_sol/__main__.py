from abi_to_sol.cli import run

if __name__ == "__main__":
    run()
