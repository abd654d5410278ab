"""Launch the anagram finder web app (JSON API plus Gradio UI)."""

from anagrammer.app.app import main


if __name__ == "__main__":
    main()
