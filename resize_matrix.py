# -*- coding: utf-8 -*-
from matrix_resizer.cli import main

if __name__ == "__main__":
    main()
