from anf_smb.main import run

if __name__ == "__main__":
    run()
