"""Board games: tic-tac-toe, Connect Four, super tic-tac-toe, Oware, Ataxx and helpers."""